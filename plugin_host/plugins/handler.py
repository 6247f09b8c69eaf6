"""Plugin handler abstract base class."""

import copy
from abc import ABC, abstractmethod
from typing import Optional

from plugin_host.models.tool_calls import FunctionCall


class PluginHandler(ABC):
    """Handles function calls routed to a plugin by the dispatcher.

    The dispatcher only depends on this interface. Handlers run synchronously
    on the event loop and must not block.
    """

    @abstractmethod
    def handle(self, call: FunctionCall) -> Optional[str]:
        """Handle a function call.

        Args:
            call: The function call whose name matched the plugin's declaration

        Returns:
            Optional short text describing the result
        """
        ...

    def clone(self) -> "PluginHandler":
        """Return a handler with the same behavior and its own state.

        Installed plugins get a clone of their template's handler. Handlers
        holding state should override this to start from a clean slate.
        """
        return copy.deepcopy(self)
