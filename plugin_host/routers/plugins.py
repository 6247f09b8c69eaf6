"""Plugin management REST API endpoints."""

import base64
import binascii
import logging

from fastapi import APIRouter, HTTPException

from plugin_host.dependencies import get_plugin_manager
from plugin_host.models.requests import ArchiveInstallRequest, LiveConfigUpdateRequest, RepositoryInstallRequest
from plugin_host.plugins.errors import PluginError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/plugins", tags=["plugins"])


def _http_error(e: PluginError) -> HTTPException:
    return HTTPException(status_code=e.http_code, detail=e.message)


@router.get("/")
async def list_plugins():
    """List all plugins in catalog order with their enabled state."""
    manager = get_plugin_manager()
    return {"plugins": manager.list_plugins()}


@router.get("/declarations")
async def list_declarations():
    """Function declarations currently exposed to the model."""
    manager = get_plugin_manager()
    return {"functionDeclarations": manager.declarations()}


@router.get("/config")
async def get_live_config():
    """Live model setup (system instruction and tools) for the current plugin state."""
    manager = get_plugin_manager()
    return manager.live_config()


@router.patch("/config")
async def update_live_config(body: LiveConfigUpdateRequest):
    """Change live model settings. New sessions use the updated setup."""
    changes = body.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No configuration changes given")
    manager = get_plugin_manager()
    try:
        return manager.update_live_config(**changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/installs")
async def list_installs():
    """Installed plugins and the recent installation attempts, including failures."""
    manager = get_plugin_manager()
    return manager.install_history()


@router.get("/{plugin_id}")
async def get_plugin(plugin_id: str):
    """Get detailed information about a specific plugin."""
    manager = get_plugin_manager()
    info = manager.get_plugin_info(plugin_id)
    if not info:
        raise HTTPException(status_code=404, detail=f"Plugin '{plugin_id}' not found")
    return info


@router.post("/{plugin_id}/enable")
async def enable_plugin(plugin_id: str):
    """Enable a plugin. New live sessions pick up the change."""
    manager = get_plugin_manager()
    try:
        plugin = manager.enable_plugin(plugin_id)
    except PluginError as e:
        raise _http_error(e)
    return {"message": f"Plugin '{plugin_id}' enabled", "plugin": plugin.to_dict()}


@router.post("/{plugin_id}/disable")
async def disable_plugin(plugin_id: str):
    """Disable a plugin. Its handler stops receiving tool calls immediately."""
    manager = get_plugin_manager()
    try:
        plugin = manager.disable_plugin(plugin_id)
    except PluginError as e:
        raise _http_error(e)
    return {"message": f"Plugin '{plugin_id}' disabled", "plugin": plugin.to_dict()}


@router.delete("/{plugin_id}")
async def uninstall_plugin(plugin_id: str):
    """Uninstall a dynamically installed plugin. Built-in plugins are refused."""
    manager = get_plugin_manager()
    try:
        plugin = manager.uninstall_plugin(plugin_id)
    except PluginError as e:
        raise _http_error(e)
    return {"message": f"Plugin '{plugin.id}' uninstalled"}


@router.post("/install/archive")
async def install_archive(body: ArchiveInstallRequest):
    """Install a plugin from an uploaded archive (.zip) or script module."""
    content = b""
    if body.content_base64:
        try:
            content = base64.b64decode(body.content_base64, validate=True)
        except (binascii.Error, ValueError):
            raise HTTPException(status_code=400, detail="content_base64 is not valid base64")

    manager = get_plugin_manager()
    try:
        plugin = await manager.install_archive(body.filename, content)
    except PluginError as e:
        raise _http_error(e)
    return {
        "message": f"Plugin \"{plugin.name}\" installed from {body.filename}",
        "plugin": plugin.to_dict(),
    }


@router.post("/install/repository")
async def install_repository(body: RepositoryInstallRequest):
    """Install a plugin from a repository URL."""
    manager = get_plugin_manager()
    try:
        plugin = await manager.install_from_repository(body.url)
    except PluginError as e:
        raise _http_error(e)
    return {
        "message": f"Plugin \"{plugin.name}\" installed from {body.url}",
        "plugin": plugin.to_dict(),
    }
