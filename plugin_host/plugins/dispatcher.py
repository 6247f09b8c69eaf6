"""Tool-call dispatcher - routes model function calls to plugin handlers."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, TYPE_CHECKING

from plugin_host.constants import ACK_DELAY_SECONDS
from plugin_host.models.tool_calls import FunctionCall, FunctionResponse, ToolCall
from plugin_host.plugins.config import PluginPreferenceStore
from plugin_host.plugins.errors import HandlerError
from plugin_host.plugins.registry import PluginRegistry

if TYPE_CHECKING:
    from plugin_host.services.session_service import LiveSession

logger = logging.getLogger(__name__)


@dataclass
class HandlerInvocation:
    """Outcome of one handler call."""

    call_id: str
    plugin_id: str
    output: Optional[str] = None
    error: Optional[HandlerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            "call_id": self.call_id,
            "plugin_id": self.plugin_id,
            "output": self.output,
            "error": self.error.message if self.error else None,
        }


@dataclass
class DispatchResult:
    invocations: List[HandlerInvocation] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)
    acknowledged: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "invocations": [i.to_dict() for i in self.invocations],
            "unmatched": self.unmatched,
            "acknowledged": self.acknowledged,
        }


class ToolCallDispatcher:
    """Dispatches function calls to every enabled plugin declaring the called name.

    Capability names are not unique, so one call may reach several plugins.
    Handler failures are logged and absorbed; acknowledgements are always success.
    """

    def __init__(self, registry: PluginRegistry, preferences: PluginPreferenceStore):
        self.registry = registry
        self.preferences = preferences

    def dispatch(self, call: FunctionCall) -> List[HandlerInvocation]:
        """Invoke all enabled handlers matching a single function call, in catalog order."""
        invocations = []
        for plugin in self.registry.list():
            if plugin.declaration.name != call.name:
                continue
            if not self.preferences.is_enabled(plugin.id):
                logger.debug(f"Skipping disabled plugin {plugin.id} for {call.name}")
                continue

            logger.info(f"Dispatching tool call {call.name} to plugin {plugin.id}")
            try:
                output = plugin.handler.handle(call)
                invocations.append(HandlerInvocation(call.id, plugin.id, output=output))
            except Exception as e:
                error = HandlerError(plugin.id, call.name, e)
                logger.exception(error.message)
                invocations.append(HandlerInvocation(call.id, plugin.id, error=error))
        return invocations

    def on_tool_call(self, tool_call: ToolCall, session: Optional[LiveSession] = None) -> DispatchResult:
        """Handle a tool call from the model.

        All matching handlers run before the acknowledgement is scheduled on
        the session (when one is given).
        """
        result = DispatchResult()
        for call in tool_call.function_calls:
            invocations = self.dispatch(call)
            if not invocations:
                logger.warning(f"No enabled plugin handles tool call {call.name}")
                result.unmatched.append(call.name)
            result.invocations.extend(invocations)

        if tool_call.function_calls and session is not None:
            responses = [FunctionResponse.success(call.id) for call in tool_call.function_calls]
            session.schedule(ACK_DELAY_SECONDS, lambda: self._send_acknowledgements(session, responses))
            result.acknowledged = [r.id for r in responses]
        return result

    async def _send_acknowledgements(self, session: LiveSession, responses: List[FunctionResponse]) -> None:
        try:
            await session.send_tool_response(responses)
        except Exception as e:
            logger.error(f"Error sending tool response: {e}")
