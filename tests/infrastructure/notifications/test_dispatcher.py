"""Tests for the realtime event dispatcher."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone

import anyio
from anyio import to_thread

from friendbook.domain.entities import Notification, NotificationKind, SenderSummary
from friendbook.infrastructure.notifications import (
    Connection,
    ConnectionRegistry,
    EventDispatcher,
)


class _FakeWebSocket:
    def __init__(self, *, fail: bool = False, delay: float = 0.0) -> None:
        self.sent: list[dict] = []
        self.fail = fail
        self.delay = delay

    async def send_json(self, message: dict) -> None:
        if self.fail:
            raise RuntimeError("socket is gone")
        if self.delay:
            await asyncio.sleep(self.delay)
        self.sent.append(message)


def _notification(recipient_id: str = "bob", notification_id: str = "n-1") -> Notification:
    return Notification(
        id=notification_id,
        recipient_id=recipient_id,
        sender_id="alice",
        kind=NotificationKind.POST_LIKED,
        related_id="post-1",
        message="Alice liked your post.",
        created_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        sender=SenderSummary(id="alice", name="Alice"),
    )


def _registry_with(user_id: str, *sockets: _FakeWebSocket) -> ConnectionRegistry:
    registry = ConnectionRegistry()
    for socket in sockets:
        registry.register(Connection(socket, user_id))
    return registry


def test_deliver_sends_once_to_every_connection_of_the_recipient():
    tabs = [_FakeWebSocket(), _FakeWebSocket(), _FakeWebSocket()]
    bystander = _FakeWebSocket()
    registry = _registry_with("bob", *tabs)
    registry.register(Connection(bystander, "carol"))

    delivered = asyncio.run(EventDispatcher(registry).deliver(_notification()))

    assert delivered == 3
    for tab in tabs:
        assert len(tab.sent) == 1
        envelope = tab.sent[0]
        assert envelope["type"] == "new_notification"
        assert envelope["payload"]["id"] == "n-1"
        assert envelope["payload"]["type"] == "postLiked"
        assert envelope["payload"]["relatedId"] == "post-1"
        assert envelope["payload"]["sender"] == {"id": "alice", "name": "Alice"}
    assert bystander.sent == []


def test_deliver_without_connections_sends_nothing():
    delivered = asyncio.run(EventDispatcher(ConnectionRegistry()).deliver(_notification()))

    assert delivered == 0


def test_failed_connection_does_not_block_the_others(caplog):
    healthy = _FakeWebSocket()
    broken = _FakeWebSocket(fail=True)
    registry = _registry_with("bob", healthy, broken)

    with caplog.at_level("WARNING"):
        delivered = asyncio.run(EventDispatcher(registry).deliver(_notification()))

    assert delivered == 1
    assert len(healthy.sent) == 1
    assert "Failed to push new_notification" in caplog.text


def test_closed_connections_are_skipped():
    socket = _FakeWebSocket()
    registry = ConnectionRegistry()
    connection = Connection(socket, "bob")
    registry.register(connection)
    connection.mark_closed()

    delivered = asyncio.run(EventDispatcher(registry).deliver(_notification()))

    assert delivered == 0
    assert socket.sent == []


def test_unpersisted_notification_is_not_pushed():
    socket = _FakeWebSocket()
    notification = _notification()
    notification.id = None

    delivered = asyncio.run(
        EventDispatcher(_registry_with("bob", socket)).deliver(notification)
    )

    assert delivered == 0
    assert socket.sent == []


def test_dispatch_inside_event_loop_schedules_delivery():
    socket = _FakeWebSocket()
    dispatcher = EventDispatcher(_registry_with("bob", socket))

    async def scenario() -> None:
        dispatcher.dispatch(_notification())
        assert dispatcher.pending_count == 1
        await dispatcher.join()

    asyncio.run(scenario())

    assert len(socket.sent) == 1


def test_dispatch_from_worker_thread_preserves_order():
    socket = _FakeWebSocket()
    dispatcher = EventDispatcher(_registry_with("bob", socket))

    def emit_all() -> None:
        for index in range(3):
            dispatcher.dispatch(_notification(notification_id=f"n-{index}"))

    async def scenario() -> None:
        await to_thread.run_sync(emit_all)
        await dispatcher.join()

    anyio.run(scenario)

    assert [message["payload"]["id"] for message in socket.sent] == ["n-0", "n-1", "n-2"]


def test_dispatch_without_reachable_loop_is_skipped():
    socket = _FakeWebSocket()
    dispatcher = EventDispatcher(_registry_with("bob", socket))

    dispatcher.dispatch(_notification())

    assert socket.sent == []


def test_dispatch_from_worker_thread_does_not_wait_for_slow_sockets():
    slow = _FakeWebSocket(delay=0.5)
    dispatcher = EventDispatcher(_registry_with("bob", slow))
    timings: dict[str, float] = {}

    def emit() -> None:
        started = time.monotonic()
        dispatcher.dispatch(_notification(notification_id="n-0"))
        dispatcher.dispatch(_notification(notification_id="n-1"))
        timings["dispatch"] = time.monotonic() - started

    async def scenario() -> None:
        await to_thread.run_sync(emit)
        assert slow.sent == []
        assert dispatcher.pending_count == 2
        await dispatcher.join()

    anyio.run(scenario)

    assert timings["dispatch"] < 0.25
    assert [message["payload"]["id"] for message in slow.sent] == ["n-0", "n-1"]
    assert dispatcher.pending_count == 0
