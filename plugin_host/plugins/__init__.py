"""Plugin system for the live agent.

Imports are lazy so lightweight components like PluginPreferenceStore can be
used (e.g. from manage_plugins.py) without pulling in the whole host.
"""

__all__ = [
    "Plugin",
    "PluginRegistry",
    "PluginHandler",
    "FunctionDeclaration",
    "PropertySchema",
    "ParameterSchema",
    "SchemaType",
    "PluginPreferenceStore",
    "PluginDiscovery",
    "CapabilityAggregator",
    "ToolCallDispatcher",
    "PluginInstaller",
    "PluginManager",
]


def __getattr__(name):
    if name in ("Plugin", "PluginRegistry"):
        from plugin_host.plugins import registry
        return getattr(registry, name)
    if name == "PluginHandler":
        from plugin_host.plugins.handler import PluginHandler
        return PluginHandler
    if name in ("FunctionDeclaration", "PropertySchema", "ParameterSchema", "SchemaType"):
        from plugin_host.plugins import declaration
        return getattr(declaration, name)
    if name == "PluginPreferenceStore":
        from plugin_host.plugins.config import PluginPreferenceStore
        return PluginPreferenceStore
    if name == "PluginDiscovery":
        from plugin_host.plugins.discovery import PluginDiscovery
        return PluginDiscovery
    if name == "CapabilityAggregator":
        from plugin_host.plugins.aggregator import CapabilityAggregator
        return CapabilityAggregator
    if name == "ToolCallDispatcher":
        from plugin_host.plugins.dispatcher import ToolCallDispatcher
        return ToolCallDispatcher
    if name == "PluginInstaller":
        from plugin_host.plugins.installer import PluginInstaller
        return PluginInstaller
    if name == "PluginManager":
        from plugin_host.plugins.manager import PluginManager
        return PluginManager
    raise AttributeError(f"module 'plugin_host.plugins' has no attribute {name!r}")
