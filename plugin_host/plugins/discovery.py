"""Built-in plugin discovery - resolves entry points into Plugin records."""

import importlib
import logging
from typing import Callable, List, Optional

from plugin_host.plugins.errors import PluginValidationError
from plugin_host.plugins.registry import Plugin, PluginRegistry

logger = logging.getLogger(__name__)


class PluginDiscovery:
    """Resolves built-in plugins from "module:function" entry points.

    Entry points are loaded in the order given; that order becomes the
    catalog order of the built-ins.
    """

    def __init__(self, entry_points: List[str], optional: Optional[List[str]] = None):
        """Initialize discovery.

        Args:
            entry_points: "module:function" paths, each returning a Plugin
            optional: entry points that may be missing without an error log
        """
        self.entry_points = entry_points
        self.optional = set(optional or [])

    def discover_all(self) -> List[Plugin]:
        """Load every entry point, skipping ones that fail.

        Returns:
            Plugins in entry point order, first occurrence of each id wins
        """
        discovered = []
        seen_ids = set()

        for entry_point in self.entry_points:
            plugin = self.discover_single(entry_point)
            if plugin is None:
                continue
            if plugin.id in seen_ids:
                logger.warning(
                    f"Duplicate plugin ID '{plugin.id}' from {entry_point}, "
                    f"skipping (first-found wins)"
                )
                continue
            seen_ids.add(plugin.id)
            discovered.append(plugin)

        logger.info(f"Discovered {len(discovered)} built-in plugin(s)")
        return discovered

    def discover_single(self, entry_point: str) -> Optional[Plugin]:
        """Resolve one entry point into a Plugin, or None if it cannot be loaded."""
        try:
            register_func = self._resolve(entry_point)
            plugin = register_func()
            if not isinstance(plugin, Plugin):
                raise TypeError(f"{entry_point} returned {type(plugin).__name__}, expected Plugin")
            logger.debug(f"Discovered plugin: {plugin.id} from {entry_point}")
            return plugin
        except ImportError as e:
            if entry_point in self.optional:
                logger.info(f"Optional plugin not available ({entry_point}): {e}")
            else:
                logger.error(f"Cannot import plugin {entry_point}: {e}")
        except Exception as e:
            logger.error(f"Error loading plugin {entry_point}: {e}")
        return None

    def load_into(self, registry: PluginRegistry) -> List[Plugin]:
        """Register all discovered plugins as built-ins."""
        loaded = []
        for plugin in self.discover_all():
            try:
                registry.register(plugin)
            except PluginValidationError as e:
                logger.error(f"Invalid built-in plugin '{plugin.id}': {e}")
                continue
            registry.mark_builtin(plugin.id)
            loaded.append(plugin)
        return loaded

    @staticmethod
    def _resolve(entry_point: str) -> Callable[[], Plugin]:
        module_name, _, func_name = entry_point.partition(":")
        if not module_name or not func_name:
            raise ValueError(f"Invalid entry point '{entry_point}', expected 'module:function'")

        module = importlib.import_module(module_name)
        register_func = getattr(module, func_name, None)
        if register_func is None:
            raise AttributeError(f"Module {module_name} has no function '{func_name}'")
        if not callable(register_func):
            raise TypeError(f"{module_name}.{func_name} is not callable")
        return register_func
