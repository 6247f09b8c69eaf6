"""Process-wide service instances shared by the routers and app lifecycle hooks.

Each getter builds its service on first use. Tests swap the plugin manager
with set_plugin_manager() and clear everything with reset_services().
"""

import logging
from typing import Optional

from plugin_host.services.config_service import ConfigService
from plugin_host.services.session_service import InMemorySessionService

logger = logging.getLogger(__name__)

_sessions: Optional[InMemorySessionService] = None
_live_config: Optional[ConfigService] = None
_plugin_manager = None


def get_session_service() -> InMemorySessionService:
    """Open live sessions, keyed by session id."""
    global _sessions
    if _sessions is None:
        _sessions = InMemorySessionService()
        logger.info("Session registry ready")
    return _sessions


def get_config_service() -> ConfigService:
    """Live model configuration shared by every session."""
    global _live_config
    if _live_config is None:
        _live_config = ConfigService()
        logger.info(f"Live model config loaded ({_live_config.get_current_config().model})")
    return _live_config


def get_plugin_manager():
    """Plugin manager with the built-in plugins loaded on first use."""
    global _plugin_manager
    if _plugin_manager is None:
        from plugin_host.constants import PLUGIN_PREFERENCES_FILE
        from plugin_host.plugins.manager import PluginManager

        manager = PluginManager(
            preferences_file=PLUGIN_PREFERENCES_FILE,
            config_service=get_config_service(),
        )
        manager.load_all()
        _plugin_manager = manager
        logger.info(f"Plugin manager ready, preferences at {PLUGIN_PREFERENCES_FILE}")
    return _plugin_manager


def set_plugin_manager(manager) -> None:
    """Use an already built manager instead of the default one."""
    global _plugin_manager
    _plugin_manager = manager


def reset_services() -> None:
    """Close open sessions and drop every instance (tests only)."""
    global _sessions, _live_config, _plugin_manager

    if _sessions is not None:
        _sessions.close_all()
    _sessions = None
    _live_config = None
    _plugin_manager = None
    logger.debug("Service instances cleared")
