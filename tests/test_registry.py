"""Tests for the plugin registry."""

import logging

import pytest

from plugin_host.plugins.errors import PluginNotFoundError, PluginValidationError, ProtectedPluginError


class TestRegister:
    """Tests for PluginRegistry.register."""

    def test_lookup_returns_registered_record(self, registry, make_plugin):
        """A registered plugin is returned by lookup and get."""
        plugin = make_plugin("calculator", version="1.0.0", author="someone")
        registry.register(plugin)

        assert registry.lookup("calculator") is plugin
        assert registry.get("calculator") == plugin

    @pytest.mark.parametrize("field_name", ["id", "name", "handler", "declaration"])
    def test_missing_field_is_rejected(self, registry, make_plugin, field_name):
        """Each required field is validated and named in the error."""
        plugin = make_plugin("broken")
        setattr(plugin, field_name, None if field_name != "id" else "")

        with pytest.raises(PluginValidationError) as exc_info:
            registry.register(plugin)

        assert exc_info.value.field_name == field_name
        assert field_name in str(exc_info.value)
        assert registry.count() == 0

    def test_reregistering_overwrites_with_warning(self, registry, make_plugin, caplog):
        """Re-registering an id replaces the record and logs a warning."""
        first = make_plugin("notes", name="Notes v1")
        second = make_plugin("notes", name="Notes v2")
        registry.register(first)

        with caplog.at_level(logging.WARNING, logger="plugin_host.plugins.registry"):
            registry.register(second)

        assert registry.lookup("notes") is second
        assert registry.count() == 1
        assert "already registered, overwriting" in caplog.text

    def test_register_is_idempotent(self, registry, make_plugin):
        """Registering the same record twice leaves one entry."""
        plugin = make_plugin("notes")
        registry.register(plugin)
        registry.register(plugin)

        assert registry.list() == [plugin]


class TestUnregister:
    """Tests for PluginRegistry.unregister."""

    def test_builtin_cannot_be_removed(self, registry, make_plugin):
        """Unregistering a built-in raises and leaves the catalog unchanged."""
        for pid in ("timer", "todo"):
            registry.register(make_plugin(pid))
            registry.mark_builtin(pid)
        before = registry.list()

        with pytest.raises(ProtectedPluginError):
            registry.unregister("timer")

        assert registry.list() == before
        assert registry.count() == 2

    def test_dynamic_plugin_is_removed(self, registry, make_plugin):
        """Unregistering a dynamic plugin returns and removes it."""
        registry.register(make_plugin("timer"))
        registry.mark_builtin("timer")
        dynamic = registry.register(make_plugin("calculator"))

        assert registry.unregister("calculator") is dynamic
        assert not registry.has("calculator")
        assert registry.ids() == ["timer"]

    def test_unknown_id_raises_not_found(self, registry):
        """Unregistering an unknown id raises PluginNotFoundError."""
        with pytest.raises(PluginNotFoundError):
            registry.unregister("ghost")

    def test_overwritten_builtin_stays_protected(self, registry, make_plugin):
        """A built-in replaced by re-registration is still protected."""
        registry.register(make_plugin("clock"))
        registry.mark_builtin("clock")
        registry.register(make_plugin("clock", name="Other Clock"))

        with pytest.raises(ProtectedPluginError):
            registry.unregister("clock")
        assert registry.lookup("clock").name == "Other Clock"


class TestOrdering:
    """Catalog order: built-ins first, then dynamic plugins in registration order."""

    def test_list_preserves_insertion_order(self, registry, make_plugin):
        """Built-ins come first, then dynamic plugins in registration order."""
        for pid in ("timer", "todo", "clock"):
            registry.register(make_plugin(pid))
            registry.mark_builtin(pid)
        registry.register(make_plugin("notes"))
        registry.register(make_plugin("calculator"))

        assert registry.ids() == ["timer", "todo", "clock", "notes", "calculator"]
        assert registry.builtin_ids() == ["timer", "todo", "clock"]
        assert registry.dynamic_ids() == ["notes", "calculator"]

    def test_overwrite_keeps_position(self, registry, make_plugin):
        """Overwriting a record keeps its catalog position."""
        registry.register(make_plugin("a"))
        registry.register(make_plugin("b"))
        registry.register(make_plugin("a", name="A again"))

        assert registry.ids() == ["a", "b"]

    def test_get_unknown_raises(self, registry):
        """lookup returns None and get raises for unknown ids."""
        assert registry.lookup("nope") is None
        with pytest.raises(PluginNotFoundError):
            registry.get("nope")

    def test_mark_builtin_requires_registered_plugin(self, registry):
        """Only registered ids can be marked built-in."""
        with pytest.raises(PluginNotFoundError):
            registry.mark_builtin("nope")
