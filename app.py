"""Plugin host service: operator REST API and live session tool-call intake."""

import logging
import os
from dotenv import load_dotenv

load_dotenv()

# Logging must be configured before plugin_host modules create their loggers
log_level = os.getenv('LOG_LEVEL', 'INFO')
logging.basicConfig(
    level=getattr(logging, log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from plugin_host import __version__
from plugin_host.dependencies import get_config_service, get_plugin_manager, get_session_service
from plugin_host.routers import plugins_router, sessions_router

app = FastAPI(
    title="Plugin Host",
    description="Plugin registry and tool-call dispatch for a live AI agent",
    version=__version__,
)

# The browser UI talks to this service from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(plugins_router)  # /api/plugins
app.include_router(sessions_router)  # /api/sessions


@app.get("/")
async def root():
    manager = get_plugin_manager()
    return {
        "service": "plugin-host",
        "version": __version__,
        "plugins": manager.registry.count(),
        "sessions": get_session_service().count(),
    }


@app.on_event("startup")
async def load_plugins():
    manager = get_plugin_manager()
    states = manager.plugin_states()
    enabled = [pid for pid, on in states.items() if on]
    logger.info(f"Built-in plugins: {', '.join(manager.registry.builtin_ids())}")
    logger.info(f"Enabled plugins: {', '.join(enabled) or 'none'}")

    live_config = get_config_service().get_current_config()
    logger.info(f"Live model: {live_config.model} (voice: {live_config.voice_name})")


@app.on_event("shutdown")
async def close_sessions():
    """Cancel acknowledgements still pending on open sessions."""
    sessions = get_session_service()
    logger.info(f"Shutting down, closing {sessions.count()} session(s)")
    sessions.close_all()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "9090"))
    uvicorn.run("app:app", host="0.0.0.0", port=port, reload=True)
