"""Exception hierarchy for the plugin system."""

from typing import Optional


class PluginError(Exception):
    """Base exception for all plugin system errors."""
    http_code = 500

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class PluginValidationError(PluginError):
    """Raised when a registration payload is missing a required field."""
    http_code = 400

    def __init__(self, field_name: str, plugin_id: Optional[str] = None):
        self.field_name = field_name
        super().__init__(
            f"Plugin is missing required field: {field_name}",
            {"field": field_name, "plugin_id": plugin_id},
        )


class ProtectedPluginError(PluginError):
    """Raised when removing a built-in plugin is attempted."""
    http_code = 403

    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(f"Cannot unregister built-in plugin: {plugin_id}", {"plugin_id": plugin_id})


class PluginNotFoundError(PluginError):
    """Raised when an operation names an unknown plugin id."""
    http_code = 404

    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(f"Plugin '{plugin_id}' not found", {"plugin_id": plugin_id})


class PackageParseError(PluginError):
    """Raised when an install descriptor (filename or URL) cannot be classified."""
    http_code = 400


class NoTemplateError(PluginError):
    """Raised when the catalog is empty at install time."""
    http_code = 409

    def __init__(self):
        super().__init__("No base plugin available to clone from")


class HandlerError(PluginError):
    """A plugin handler raised during dispatch. Never propagated past the dispatcher."""

    def __init__(self, plugin_id: str, call_name: str, cause: BaseException):
        self.plugin_id = plugin_id
        self.call_name = call_name
        self.cause = cause
        super().__init__(
            f"Plugin '{plugin_id}' failed handling '{call_name}': {cause}",
            {"plugin_id": plugin_id, "call": call_name, "error_type": type(cause).__name__},
        )


class BuiltinConflictError(PluginError):
    """Raised when an installed package would take over a built-in plugin's id."""
    http_code = 409

    def __init__(self, plugin_id: str):
        self.plugin_id = plugin_id
        super().__init__(
            f"Plugin id '{plugin_id}' belongs to a built-in plugin and cannot be installed",
            {"plugin_id": plugin_id},
        )
