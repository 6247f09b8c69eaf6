"""Plugin registry - the catalog of built-in and dynamically installed plugins."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from plugin_host.plugins.declaration import FunctionDeclaration
from plugin_host.plugins.errors import (
    PluginNotFoundError,
    PluginValidationError,
    ProtectedPluginError,
)
from plugin_host.plugins.handler import PluginHandler

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "name", "handler", "declaration")


@dataclass
class Plugin:
    """A registered unit combining identity, capability declaration and handler."""

    id: str
    name: str
    declaration: Optional[FunctionDeclaration]
    handler: Optional[PluginHandler] = field(default=None, repr=False)
    component: Any = field(default=None, repr=False)  # presentation unit, owned by the UI layer
    description: Optional[str] = None
    version: Optional[str] = None
    author: Optional[str] = None

    @property
    def capability(self) -> str:
        return self.declaration.name

    def to_dict(self) -> dict:
        """Serialize plugin to dict for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "author": self.author,
            "capability": self.declaration.name if self.declaration else None,
            "declaration": self.declaration.to_wire() if self.declaration else None,
        }


class PluginRegistry:
    """Central catalog for all plugins.

    Insertion order is catalog order: built-ins first, in the order they were
    discovered, then dynamic plugins in registration order.
    """

    def __init__(self):
        self._plugins: Dict[str, Plugin] = {}
        self._builtin_ids: Set[str] = set()

    def register(self, plugin: Plugin) -> Plugin:
        """Register a plugin, overwriting any existing record with the same id."""
        for name in REQUIRED_FIELDS:
            if not getattr(plugin, name, None):
                raise PluginValidationError(name, getattr(plugin, "id", None))

        if plugin.id in self._plugins:
            logger.warning(f"Plugin '{plugin.id}' already registered, overwriting")
        self._plugins[plugin.id] = plugin
        logger.info(f"Registered plugin: {plugin.id} ({plugin.declaration.name})")
        return plugin

    def unregister(self, plugin_id: str) -> Plugin:
        """Remove a dynamic plugin.

        Raises:
            ProtectedPluginError: if the id belongs to a built-in plugin
            PluginNotFoundError: if the id is not in the catalog
        """
        if plugin_id in self._builtin_ids:
            logger.warning(f"Cannot unregister built-in plugin: {plugin_id}")
            raise ProtectedPluginError(plugin_id)
        if plugin_id not in self._plugins:
            logger.warning(f"Plugin {plugin_id} not found for unregistration")
            raise PluginNotFoundError(plugin_id)

        plugin = self._plugins.pop(plugin_id)
        logger.info(f"Unregistered plugin: {plugin_id}")
        return plugin

    def mark_builtin(self, plugin_id: str) -> None:
        """Record a registered plugin as built-in. Only called during startup discovery."""
        if plugin_id not in self._plugins:
            raise PluginNotFoundError(plugin_id)
        self._builtin_ids.add(plugin_id)

    def lookup(self, plugin_id: str) -> Optional[Plugin]:
        """Get a plugin by ID, or None."""
        return self._plugins.get(plugin_id)

    def get(self, plugin_id: str) -> Plugin:
        """Get a plugin by ID, raising PluginNotFoundError if absent."""
        plugin = self._plugins.get(plugin_id)
        if plugin is None:
            raise PluginNotFoundError(plugin_id)
        return plugin

    def list(self) -> List[Plugin]:
        """Get all plugins in catalog order."""
        return list(self._plugins.values())

    def ids(self) -> List[str]:
        return list(self._plugins)

    def builtin_ids(self) -> List[str]:
        return [pid for pid in self._plugins if pid in self._builtin_ids]

    def dynamic_ids(self) -> List[str]:
        return [pid for pid in self._plugins if pid not in self._builtin_ids]

    def is_builtin(self, plugin_id: str) -> bool:
        return plugin_id in self._builtin_ids

    def has(self, plugin_id: str) -> bool:
        """Check if a plugin is registered."""
        return plugin_id in self._plugins

    def count(self) -> int:
        """Get total number of registered plugins."""
        return len(self._plugins)

    def first(self) -> Optional[Plugin]:
        return next(iter(self._plugins.values()), None)
