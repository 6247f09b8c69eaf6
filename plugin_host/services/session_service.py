"""Live sessions - the lifetime scope for scheduled tool-call acknowledgements."""

import asyncio
import inspect
import logging
import uuid
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

from plugin_host.models.tool_calls import FunctionResponse

logger = logging.getLogger(__name__)

ResponseSink = Callable[[List[FunctionResponse]], Union[None, Awaitable[None]]]


class LiveSession:
    """One conversation with the live model.

    Continuations scheduled on a session are cancelled when it closes, and
    check liveness before acting in case they were already running.
    """

    def __init__(self, session_id: str, sink: Optional[ResponseSink] = None):
        self.session_id = session_id
        self.created_at = datetime.now()
        self.closed = False
        self._sink = sink
        self._outbox: List[FunctionResponse] = []
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, delay: float, callback: Callable[[], Any]) -> asyncio.Task:
        """Run callback after delay seconds on the running event loop."""
        async def _run():
            await asyncio.sleep(delay)
            if self.closed:
                logger.debug(f"Session {self.session_id} closed, dropping scheduled task")
                return
            result = callback()
            if inspect.isawaitable(result):
                await result

        task = asyncio.get_running_loop().create_task(_run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def send_tool_response(self, responses: List[FunctionResponse]) -> bool:
        """Deliver acknowledgements to the model side of the session."""
        if self.closed:
            logger.warning(f"Session {self.session_id} is closed, not sending {len(responses)} response(s)")
            return False

        if self._sink is None:
            self._outbox.extend(responses)
        else:
            result = self._sink(responses)
            if inspect.isawaitable(result):
                await result
        logger.debug(f"Session {self.session_id}: sent {len(responses)} tool response(s)")
        return True

    def drain(self) -> List[FunctionResponse]:
        """Return and clear acknowledgements collected by the default sink."""
        sent, self._outbox = self._outbox, []
        return sent

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def close(self) -> None:
        """Close the session and cancel outstanding scheduled tasks."""
        if self.closed:
            return
        self.closed = True
        for task in list(self._tasks):
            task.cancel()
        logger.info(f"Closed session {self.session_id} ({len(self._tasks)} pending task(s) cancelled)")

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "created_at": self.created_at.isoformat(),
            "closed": self.closed,
            "pending": self.pending,
        }


class InMemorySessionService:
    """Tracks open live sessions by id."""

    def __init__(self):
        self._sessions: Dict[str, LiveSession] = {}

    def create(self, session_id: Optional[str] = None, sink: Optional[ResponseSink] = None) -> LiveSession:
        session_id = session_id or str(uuid.uuid4())
        existing = self._sessions.get(session_id)
        if existing and not existing.closed:
            logger.warning(f"Session {session_id} already open, replacing")
            existing.close()
        session = LiveSession(session_id, sink)
        self._sessions[session_id] = session
        logger.info(f"Created session {session_id}")
        return session

    def get(self, session_id: str) -> Optional[LiveSession]:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def count(self) -> int:
        return len(self._sessions)
