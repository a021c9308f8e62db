"""Tests for the SSE event stream and the presence it carries."""

import asyncio
import json

import pytest

from services import HEARTBEAT_FRAME, event_stream

from tests.helpers import seed_grid


def _payload(frame: str) -> dict:
    assert frame.startswith("data: ")
    assert frame.endswith("\n\n")
    return json.loads(frame[len("data: "):-2])


@pytest.fixture
def session(store):
    grid = seed_grid(store)
    return store.create_session(grid.id)


class TestEventStream:

    def test_first_frame_is_game_state(self, broadcaster, session):
        session.add_player("Alice")
        session.set_cell(0, 1, "A")

        async def scenario():
            stream = event_stream(broadcaster, session, "Alice")
            frame = await asyncio.wait_for(stream.__anext__(), 1)
            await stream.aclose()
            return frame

        event = _payload(asyncio.run(scenario()))
        assert event["type"] == "game_state"
        assert event["state"][0][1] == "A"
        assert event["players"]["Alice"]["pseudo"] == "Alice"

    def test_game_state_sent_only_to_new_subscriber(self, broadcaster, session):
        async def scenario():
            observer = broadcaster.subscribe(session.id)
            stream = event_stream(broadcaster, session)
            await stream.__anext__()
            assert observer.qsize() == 0
            await stream.aclose()
            broadcaster.unsubscribe(observer)

        asyncio.run(scenario())

    def test_forwards_published_messages_in_order(self, broadcaster, session):
        async def scenario():
            stream = event_stream(broadcaster, session)
            await stream.__anext__()
            broadcaster.publish(session.id, '{"type":"cell_update","n":1}')
            broadcaster.publish(session.id, '{"type":"cell_update","n":2}')
            frames = [
                await asyncio.wait_for(stream.__anext__(), 1),
                await asyncio.wait_for(stream.__anext__(), 1),
            ]
            await stream.aclose()
            return frames

        frames = asyncio.run(scenario())
        assert [_payload(f)["n"] for f in frames] == [1, 2]

    def test_heartbeat_when_idle(self, broadcaster, session):
        async def scenario():
            stream = event_stream(broadcaster, session, heartbeat_seconds=0.05)
            await stream.__anext__()
            frame = await asyncio.wait_for(stream.__anext__(), 1)
            await stream.aclose()
            return frame

        assert asyncio.run(scenario()) == HEARTBEAT_FRAME


class TestDisconnect:

    def test_close_removes_player_and_announces_departure(self, broadcaster, session):
        session.add_player("Alice")
        session.add_player("Bob")

        async def scenario():
            observer = broadcaster.subscribe(session.id)
            stream = event_stream(broadcaster, session, "Alice")
            await stream.__anext__()
            assert broadcaster.subscriber_count(session.id) == 2

            await stream.aclose()

            assert broadcaster.subscriber_count(session.id) == 1
            left = json.loads(observer.get_nowait())
            broadcaster.unsubscribe(observer)
            return left

        left = asyncio.run(scenario())
        assert left == {"type": "player_left", "pseudo": "Alice"}
        assert set(session.snapshot_players()) == {"Bob"}

    def test_anonymous_stream_leaves_roster_alone(self, broadcaster, session):
        session.add_player("Alice")

        async def scenario():
            observer = broadcaster.subscribe(session.id)
            stream = event_stream(broadcaster, session)
            await stream.__anext__()
            await stream.aclose()
            size = observer.qsize()
            broadcaster.unsubscribe(observer)
            return size

        assert asyncio.run(scenario()) == 0
        assert set(session.snapshot_players()) == {"Alice"}
        assert broadcaster.subscriber_count(session.id) == 0

    def test_cancelled_consumer_runs_cleanup(self, broadcaster, session):
        session.add_player("Alice")

        async def scenario():
            async def consume():
                async for _ in event_stream(broadcaster, session, "Alice"):
                    pass

            task = asyncio.create_task(consume())
            await asyncio.sleep(0.05)
            assert broadcaster.subscriber_count(session.id) == 1
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert broadcaster.subscriber_count(session.id) == 0
        assert session.snapshot_players() == {}
