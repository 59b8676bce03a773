"""Push persisted notifications to the recipient's live websockets."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from anyio import from_thread

from friendbook.domain.entities import Notification

from .envelope import serialize_notification
from .registry import Connection, ConnectionRegistry

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    """Interface the application layer uses to announce a new notification."""

    def dispatch(self, notification: Notification) -> None: ...


class EventDispatcher:
    """Deliver ``new_notification`` envelopes on a best-effort basis.

    The notification record is already durable when it reaches the dispatcher,
    so failed or skipped pushes are only logged: the recipient will see the
    event on the next backfill. ``dispatch`` never waits for a send; pushes for
    one recipient are chained so they leave in the order they were dispatched.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry
        self._pending: set[asyncio.Task[int]] = set()
        self._tails: dict[str, asyncio.Task[int]] = {}

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def dispatch(self, notification: Notification) -> None:
        """Schedule a push of ``notification`` from sync or async code."""

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run_sync(self._schedule, notification)
            except RuntimeError:
                logger.debug(
                    "No event loop reachable; skipping realtime push of notification %s",
                    notification.id,
                )
        else:
            self._schedule(notification)

    def _schedule(self, notification: Notification) -> None:
        # Runs on the event loop thread.
        recipient_id = notification.recipient_id
        previous = self._tails.get(recipient_id)
        task = asyncio.get_running_loop().create_task(
            self._deliver_after(previous, notification)
        )
        self._pending.add(task)
        self._tails[recipient_id] = task

        def _forget(done: asyncio.Task[int]) -> None:
            self._pending.discard(done)
            if self._tails.get(recipient_id) is done:
                del self._tails[recipient_id]

        task.add_done_callback(_forget)

    async def _deliver_after(
        self, previous: asyncio.Task[int] | None, notification: Notification
    ) -> int:
        if previous is not None:
            await asyncio.wait({previous})
        return await self.deliver(notification)

    async def join(self) -> None:
        """Wait until every scheduled push has finished."""

        while self._pending:
            await asyncio.wait(set(self._pending))

    async def deliver(self, notification: Notification) -> int:
        """Send ``notification`` to every open connection of its recipient.

        Returns the number of connections that accepted the message.
        """

        connections = [
            connection
            for connection in self._registry.connections_for(notification.recipient_id)
            if connection.is_open
        ]
        if not connections:
            return 0

        try:
            message = serialize_notification(notification)
        except ValueError:
            logger.exception("Could not serialize notification %s", notification.id)
            return 0

        results = await asyncio.gather(
            *(self._send(connection, message) for connection in connections)
        )
        return sum(results)

    async def _send(self, connection: Connection, message: dict[str, Any]) -> bool:
        try:
            await connection.send_json(message)
        except Exception:
            logger.warning(
                "Failed to push %s to a websocket of user %s",
                message.get("type"),
                connection.user_id,
                exc_info=True,
            )
            return False
        return True


__all__ = ["EventDispatcher", "NotificationDispatcher"]
