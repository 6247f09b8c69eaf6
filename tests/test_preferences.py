"""Tests for the plugin preference store."""

import json

from plugin_host.plugins.config import PluginPreferenceStore


class TestPluginPreferenceStore:
    """Tests for PluginPreferenceStore."""

    def test_unset_plugin_defaults_to_enabled(self, preferences):
        """Plugins with no stored flag are enabled."""
        assert preferences.get("timer") is None
        assert preferences.is_enabled("timer") is True

    def test_set_and_get(self, preferences):
        """Stored flags are returned and can be flipped back."""
        preferences.set("timer", False)
        assert preferences.get("timer") is False
        assert preferences.is_enabled("timer") is False

        preferences.enable("timer")
        assert preferences.is_enabled("timer") is True

    def test_load_states_fills_defaults(self, preferences):
        """load_states fills unset ids with True."""
        preferences.disable("todo")

        states = preferences.load_states(["timer", "todo", "clock"])

        assert states == {"timer": True, "todo": False, "clock": True}

    def test_durable_across_instances(self, preferences_file):
        """Flags written by one store are read by a new one."""
        store = PluginPreferenceStore(preferences_file)
        store.disable("timer")

        reopened = PluginPreferenceStore(preferences_file)

        assert reopened.is_enabled("timer") is False
        assert json.loads(preferences_file.read_text(encoding="utf-8")) == {"enabled": {"timer": False}}

    def test_corrupt_file_falls_back_to_defaults(self, preferences_file):
        """An unreadable file yields the default state."""
        preferences_file.parent.mkdir(parents=True)
        preferences_file.write_text("{not json", encoding="utf-8")

        store = PluginPreferenceStore(preferences_file)

        assert store.is_enabled("timer") is True
        assert store.stored_ids() == []

    def test_forget_removes_stored_flag(self, preferences_file):
        """forget drops the flag from memory and disk."""
        store = PluginPreferenceStore(preferences_file)
        store.disable("calculator")
        store.forget("calculator")

        assert store.get("calculator") is None
        assert PluginPreferenceStore(preferences_file).stored_ids() == []

    def test_reload_picks_up_external_changes(self, preferences_file):
        """reload re-reads the file written by another store."""
        store = PluginPreferenceStore(preferences_file)
        PluginPreferenceStore(preferences_file).disable("clock")

        assert store.is_enabled("clock") is True
        store.reload()
        assert store.is_enabled("clock") is False
