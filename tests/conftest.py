"""Shared fixtures for plugin host tests."""

from typing import List, Optional

import pytest

from plugin_host.models.tool_calls import FunctionCall
from plugin_host.plugins.config import PluginPreferenceStore
from plugin_host.plugins.declaration import FunctionDeclaration, ParameterSchema, PropertySchema, SchemaType
from plugin_host.plugins.handler import PluginHandler
from plugin_host.plugins.manager import PluginManager
from plugin_host.plugins.registry import Plugin, PluginRegistry


class RecordingHandler(PluginHandler):
    """Handler that records calls and optionally fails."""

    def __init__(self, output: Optional[str] = None, error: Optional[Exception] = None, log: Optional[list] = None, tag: str = ""):
        self.calls: List[FunctionCall] = []
        self.output = output
        self.error = error
        self.log = log
        self.tag = tag

    def clone(self) -> "RecordingHandler":
        return RecordingHandler(self.output, self.error, self.log, self.tag)

    def handle(self, call: FunctionCall) -> Optional[str]:
        self.calls.append(call)
        if self.log is not None:
            self.log.append(self.tag)
        if self.error is not None:
            raise self.error
        return self.output


@pytest.fixture
def make_plugin():
    """Factory for plugins with a recording handler."""

    def _make(plugin_id: str, capability: Optional[str] = None, handler: Optional[PluginHandler] = None, **kwargs) -> Plugin:
        declaration = FunctionDeclaration(
            name=capability or f"{plugin_id}_action",
            description=f"Action of {plugin_id}",
            parameters=ParameterSchema(
                properties={"value": PropertySchema(type=SchemaType.STRING, description="Any value")},
                required=["value"],
            ),
        )
        return Plugin(
            id=plugin_id,
            name=kwargs.pop("name", f"{plugin_id.title()} Plugin"),
            declaration=declaration,
            handler=handler or RecordingHandler(output=f"{plugin_id} done"),
            component=kwargs.pop("component", f"{plugin_id}-panel"),
            **kwargs,
        )

    return _make


@pytest.fixture
def registry() -> PluginRegistry:
    return PluginRegistry()


@pytest.fixture
def preferences() -> PluginPreferenceStore:
    """In-memory preference store (never written to disk)."""
    return PluginPreferenceStore(None)


@pytest.fixture
def preferences_file(tmp_path):
    return tmp_path / "data" / "plugin_preferences.json"


@pytest.fixture
def manager(preferences_file) -> PluginManager:
    """Plugin manager with the bundled plugins loaded and no install delay."""
    manager = PluginManager(preferences_file=preferences_file, install_delay_scale=0)
    manager.load_all()
    return manager


def call(name: str, call_id: str = "call-1", **args) -> FunctionCall:
    return FunctionCall(name=name, args=args, id=call_id)


@pytest.fixture
def function_call():
    return call


@pytest.fixture
def handler_factory():
    return RecordingHandler
