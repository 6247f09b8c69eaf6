"""Tests for live sessions and the session service."""

import asyncio

from plugin_host.models.tool_calls import FunctionResponse
from plugin_host.services.session_service import InMemorySessionService, LiveSession


class TestLiveSession:
    """Tests for LiveSession scheduling and delivery."""

    def test_scheduled_callback_runs_after_delay(self):
        """A scheduled callback runs after its delay and is then forgotten."""
        ran = []

        async def scenario():
            session = LiveSession("s1")
            session.schedule(0.01, lambda: ran.append("done"))
            assert ran == []
            await asyncio.sleep(0.05)
            return session.pending

        pending = asyncio.run(scenario())

        assert ran == ["done"]
        assert pending == 0

    def test_close_cancels_scheduled_callbacks(self):
        """Closing a session cancels callbacks that have not run."""
        ran = []

        async def scenario():
            session = LiveSession("s1")
            session.schedule(0.01, lambda: ran.append("done"))
            session.close()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())

        assert ran == []

    def test_async_sink_is_awaited(self):
        """Coroutine sinks are awaited."""
        delivered = []

        async def sink(responses):
            delivered.extend(responses)

        async def scenario():
            session = LiveSession("s1", sink=sink)
            return await session.send_tool_response([FunctionResponse.success("c1")])

        assert asyncio.run(scenario()) is True
        assert [r.id for r in delivered] == ["c1"]

    def test_closed_session_refuses_responses(self):
        """A closed session drops responses and reports False."""
        async def scenario():
            session = LiveSession("s1")
            session.close()
            return await session.send_tool_response([FunctionResponse.success("c1")]), session.drain()

        sent, outbox = asyncio.run(scenario())

        assert sent is False
        assert outbox == []

    def test_drain_clears_outbox(self):
        """drain returns collected responses once."""
        async def scenario():
            session = LiveSession("s1")
            await session.send_tool_response([FunctionResponse.success("c1")])
            return session.drain(), session.drain()

        first, second = asyncio.run(scenario())

        assert len(first) == 1
        assert second == []


class TestInMemorySessionService:
    """Tests for InMemorySessionService."""

    def test_create_generates_id(self):
        """Sessions without an id get a generated one."""
        service = InMemorySessionService()

        session = service.create()

        assert session.session_id
        assert service.get(session.session_id) is session
        assert service.count() == 1

    def test_recreating_closes_previous_session(self):
        """Reusing an open id closes the previous session."""
        service = InMemorySessionService()
        first = service.create("s1")

        second = service.create("s1")

        assert first.closed is True
        assert service.get("s1") is second
        assert service.count() == 1

    def test_close_and_close_all(self):
        """close reports whether a session existed; close_all closes the rest."""
        service = InMemorySessionService()
        a = service.create("a")
        b = service.create("b")

        assert service.close("a") is True
        assert service.close("a") is False
        assert a.closed is True

        service.close_all()
        assert b.closed is True
        assert service.count() == 0
