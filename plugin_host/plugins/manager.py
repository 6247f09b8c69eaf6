"""Plugin manager - top-level orchestrator for the plugin system."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from plugin_host.constants import (
    BUILTIN_PLUGINS,
    INSTALL_DELAY_SCALE,
    OPTIONAL_BUILTIN_PLUGINS,
)
from plugin_host.models.tool_calls import ToolCall
from plugin_host.plugins.aggregator import CapabilityAggregator
from plugin_host.plugins.config import PluginPreferenceStore
from plugin_host.plugins.discovery import PluginDiscovery
from plugin_host.plugins.dispatcher import DispatchResult, ToolCallDispatcher
from plugin_host.plugins.installer import ArchiveUpload, PluginInstaller, RepositoryReference
from plugin_host.plugins.registry import Plugin, PluginRegistry
from plugin_host.services.config_service import ConfigService
from plugin_host.services.session_service import LiveSession

logger = logging.getLogger(__name__)


class PluginManager:
    """Top-level plugin system orchestrator.

    Owns one registry and hands it explicitly to the aggregator, dispatcher
    and installer.
    """

    def __init__(
        self,
        preferences_file: Optional[Path] = None,
        config_service: Optional[ConfigService] = None,
        entry_points: Optional[List[str]] = None,
        optional_entry_points: Optional[List[str]] = None,
        install_delay_scale: float = INSTALL_DELAY_SCALE,
    ):
        self.registry = PluginRegistry()
        self.preferences = PluginPreferenceStore(preferences_file)
        self.config_service = config_service or ConfigService()

        self.discovery = PluginDiscovery(
            BUILTIN_PLUGINS if entry_points is None else entry_points,
            OPTIONAL_BUILTIN_PLUGINS if optional_entry_points is None else optional_entry_points,
        )
        self.aggregator = CapabilityAggregator(self.registry)
        self.dispatcher = ToolCallDispatcher(self.registry, self.preferences)
        self.installer = PluginInstaller(self.registry, delay_scale=install_delay_scale)

    def load_all(self) -> None:
        """Discover and register the built-in plugins."""
        loaded = self.discovery.load_into(self.registry)
        enabled = [p.id for p in loaded if self.preferences.is_enabled(p.id)]
        logger.info(
            f"Plugin system initialized, "
            f"{len(enabled)}/{self.registry.count()} plugins enabled"
        )

    def plugin_states(self) -> Dict[str, bool]:
        """Enabled flag for every plugin in the catalog."""
        return self.preferences.load_states(self.registry.ids())

    def enable_plugin(self, plugin_id: str) -> Plugin:
        """Enable a plugin. Takes effect on the next live config refresh."""
        plugin = self.registry.get(plugin_id)
        self.preferences.enable(plugin_id)
        return plugin

    def disable_plugin(self, plugin_id: str) -> Plugin:
        """Disable a plugin. Its handler is skipped from now on."""
        plugin = self.registry.get(plugin_id)
        self.preferences.disable(plugin_id)
        return plugin

    async def install_archive(self, filename: str, content: bytes = b"") -> Plugin:
        """Install a plugin from an uploaded archive or script module."""
        return await self.installer.install_from_package(ArchiveUpload(filename, content))

    async def install_from_repository(self, url: str) -> Plugin:
        """Install a plugin from a repository URL."""
        return await self.installer.install_from_package(RepositoryReference(url))

    def uninstall_plugin(self, plugin_id: str) -> Plugin:
        """Remove a dynamic plugin and forget its stored preference."""
        plugin = self.installer.uninstall(plugin_id)
        self.preferences.forget(plugin_id)
        return plugin

    def install_history(self) -> dict:
        """Installed plugin ids and the recent attempt log."""
        return {
            "installed": self.installer.loaded_plugin_ids(),
            "attempts": self.installer.history(),
        }

    def on_tool_call(self, tool_call: ToolCall, session: Optional[LiveSession] = None) -> DispatchResult:
        return self.dispatcher.on_tool_call(tool_call, session)

    def declarations(self) -> List[dict]:
        return self.aggregator.declarations_for(self.plugin_states())

    def update_live_config(self, **changes) -> dict:
        """Change live model settings and return the resulting setup.

        Raises:
            ValueError: the changed configuration is invalid
        """
        self.config_service.update(**changes)
        return self.live_config()

    def live_config(self) -> dict:
        """Live model setup reflecting the current plugin states."""
        return self.aggregator.build_live_config(
            self.plugin_states(), self.config_service.get_current_config()
        )

    def get_plugin_info(self, plugin_id: str) -> Optional[dict]:
        """Get plugin information as dict."""
        plugin = self.registry.lookup(plugin_id)
        if not plugin:
            return None
        info = self._describe(plugin)
        attempt = self.installer.installation_of(plugin_id)
        info["installation"] = attempt.to_dict() if attempt else None
        return info

    def list_plugins(self) -> List[dict]:
        """List all plugins as dicts."""
        return [self._describe(p) for p in self.registry.list()]

    def _describe(self, plugin: Plugin) -> dict:
        info = plugin.to_dict()
        info["builtin"] = self.registry.is_builtin(plugin.id)
        info["enabled"] = self.preferences.is_enabled(plugin.id)
        return info
