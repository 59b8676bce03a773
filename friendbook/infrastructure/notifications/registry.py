"""Connection registry for notification websockets."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from enum import Enum
from typing import Any, DefaultDict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class Connection:
    """A live websocket bound to the user it authenticated as.

    The user identity is fixed when the handshake succeeds and cannot be
    reassigned afterwards.
    """

    __slots__ = ("_websocket", "_user_id", "state")

    def __init__(self, websocket: WebSocket, user_id: str) -> None:
        if not user_id:
            raise ValueError("A connection must be bound to a user identity")
        self._websocket = websocket
        self._user_id = user_id
        self.state = ConnectionState.OPEN

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def websocket(self) -> WebSocket:
        return self._websocket

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    async def send_json(self, message: dict[str, Any]) -> None:
        await self._websocket.send_json(message)

    def mark_closed(self) -> None:
        self.state = ConnectionState.CLOSED

    def __repr__(self) -> str:
        return f"Connection(user_id={self._user_id!r}, state={self.state.value})"


class ConnectionRegistry:
    """Track the open connections of every authenticated user.

    All mutations happen inside a short critical section guarded by a process
    wide lock; nothing awaits while the lock is held, so the registry may be
    read from worker threads as well as from the event loop.
    """

    def __init__(self) -> None:
        self._connections: DefaultDict[str, Set[Connection]] = defaultdict(set)
        self._lock = threading.Lock()

    def register(self, connection: Connection) -> None:
        """Add ``connection`` to the pool of the user it authenticated as."""

        user_id = connection.user_id
        with self._lock:
            self._connections[user_id].add(connection)
        logger.debug("Registered websocket for user %s", user_id)

    def unregister(self, connection: Connection) -> None:
        """Remove ``connection`` from its user's pool; unknown connections are ignored."""

        user_id = connection.user_id
        with self._lock:
            connections = self._connections.get(user_id)
            if connections is None or connection not in connections:
                return
            connections.discard(connection)
            if not connections:
                self._connections.pop(user_id, None)
        logger.debug("Unregistered websocket for user %s", user_id)

    def connections_for(self, user_id: str) -> frozenset[Connection]:
        """Return a snapshot of the live connections for ``user_id``."""

        with self._lock:
            connections = self._connections.get(user_id)
            return frozenset(connections) if connections else frozenset()

    def is_online(self, user_id: str) -> bool:
        with self._lock:
            return bool(self._connections.get(user_id))

    @property
    def connection_count(self) -> int:
        with self._lock:
            return sum(len(connections) for connections in self._connections.values())

    async def close_all(self, code: int = 1001) -> None:
        """Close every registered connection and empty the registry."""

        with self._lock:
            connections = [
                connection
                for user_connections in self._connections.values()
                for connection in user_connections
            ]
            self._connections.clear()

        for connection in connections:
            connection.state = ConnectionState.CLOSING
            try:
                await connection.websocket.close(code=code)
            except Exception:  # pragma: no cover - peer already gone
                logger.debug("Websocket for user %s was already closed", connection.user_id)
            connection.mark_closed()


__all__ = ["Connection", "ConnectionRegistry", "ConnectionState"]
