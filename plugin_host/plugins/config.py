"""Plugin preference store - durable per-plugin enabled flags."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)


class PluginPreferenceStore:
    """Manages the plugin preferences file.

    File format:
    {
        "enabled": {
            "timer": false,
            "todo": true
        }
    }

    Plugins with no stored value are enabled.
    """

    def __init__(self, preferences_file: Optional[Path] = None):
        self.preferences_file = preferences_file
        self._config: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        """Load preferences from file, falling back to defaults."""
        if self.preferences_file and self.preferences_file.exists():
            try:
                with open(self.preferences_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict) and isinstance(data.get("enabled", {}), dict):
                    data.setdefault("enabled", {})
                    return data
                logger.error(f"Unexpected plugin preferences format in {self.preferences_file}")
            except (json.JSONDecodeError, IOError) as e:
                logger.error(f"Error loading plugin preferences: {e}")

        return {"enabled": {}}

    def _save(self) -> None:
        """Save preferences to file. In-memory stores are never written."""
        if self.preferences_file is None:
            return
        self.preferences_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.preferences_file, "w", encoding="utf-8") as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved plugin preferences to {self.preferences_file}")

    def get(self, plugin_id: str) -> Optional[bool]:
        """Get the stored flag for a plugin, or None if never set."""
        value = self._config["enabled"].get(plugin_id)
        return bool(value) if value is not None else None

    def set(self, plugin_id: str, enabled: bool) -> None:
        """Store the enabled flag for a plugin."""
        self._config["enabled"][plugin_id] = bool(enabled)
        self._save()
        logger.info(f"{'Enabled' if enabled else 'Disabled'} plugin: {plugin_id}")

    def is_enabled(self, plugin_id: str) -> bool:
        stored = self.get(plugin_id)
        return True if stored is None else stored

    def enable(self, plugin_id: str) -> None:
        self.set(plugin_id, True)

    def disable(self, plugin_id: str) -> None:
        self.set(plugin_id, False)

    def load_states(self, plugin_ids: Iterable[str]) -> Dict[str, bool]:
        """Build the enabled-state mapping for the given plugin ids."""
        return {pid: self.is_enabled(pid) for pid in plugin_ids}

    def forget(self, plugin_id: str) -> None:
        """Drop the stored flag for a plugin."""
        if self._config["enabled"].pop(plugin_id, None) is not None:
            self._save()

    def stored_ids(self) -> list:
        return list(self._config["enabled"])

    def reload(self) -> None:
        """Reload preferences from disk."""
        self._config = self._load()
