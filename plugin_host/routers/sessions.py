"""Live session endpoints - tool-call intake and acknowledgement delivery."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from plugin_host.dependencies import get_plugin_manager, get_session_service
from plugin_host.models.requests import CreateSessionRequest
from plugin_host.models.tool_calls import ToolCall
from plugin_host.services.session_service import LiveSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


def _get_open_session(session_id: str) -> LiveSession:
    session = get_session_service().get(session_id)
    if session is None or session.closed:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return session


@router.post("/")
async def create_session(body: Optional[CreateSessionRequest] = None):
    """Open a live session and return the model setup to send upstream."""
    session = get_session_service().create(body.session_id if body else None)
    return {
        "session": session.to_dict(),
        "config": get_plugin_manager().live_config(),
    }


@router.post("/{session_id}/tool-calls")
async def post_tool_call(session_id: str, tool_call: ToolCall):
    """Dispatch a tool call from the model.

    Handlers run before this returns; acknowledgements are delivered to the
    session shortly afterwards and can be collected from /responses.
    """
    session = _get_open_session(session_id)
    result = get_plugin_manager().on_tool_call(tool_call, session)
    return result.to_dict()


@router.get("/{session_id}/responses")
async def get_responses(session_id: str):
    """Collect acknowledgements sent since the last poll."""
    session = _get_open_session(session_id)
    return {"functionResponses": [r.to_wire() for r in session.drain()]}


@router.delete("/{session_id}")
async def close_session(session_id: str):
    """Close a session, cancelling acknowledgements not yet sent."""
    if not get_session_service().close(session_id):
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return {"message": f"Session '{session_id}' closed"}
