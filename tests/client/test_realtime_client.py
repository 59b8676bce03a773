"""Tests for the realtime notification client."""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from websockets.datastructures import Headers
from websockets.exceptions import ConnectionClosedError, InvalidStatus
from websockets.frames import Close
from websockets.http11 import Response

from friendbook.client import (
    HandshakeRejectedError,
    NotificationClient,
    ReconnectExhaustedError,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _wire_notification(notification_id: str, minutes: int = 0, is_read: bool = False) -> dict:
    return {
        "id": notification_id,
        "recipientId": "bob",
        "sender": {"id": "alice", "name": "Alice"},
        "type": "postLiked",
        "relatedId": "post-1",
        "isRead": is_read,
        "createdAt": (BASE_TIME + timedelta(minutes=minutes)).isoformat(),
    }


def _push(notification_id: str, minutes: int = 0) -> str:
    return json.dumps(
        {"type": "new_notification", "payload": _wire_notification(notification_id, minutes)}
    )


READY = json.dumps({"type": "ready", "payload": {"userId": "bob"}})


class _ScriptedWebSocket:
    """Yield scripted frames, then raise ``end`` or finish normally."""

    def __init__(self, frames, end: BaseException | None = None) -> None:
        self._frames = list(frames)
        self._end = end

    async def recv(self):
        if self._frames:
            return self._frames.pop(0)
        if self._end is not None:
            raise self._end
        raise ConnectionClosedError(None, None)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._frames:
            return self._frames.pop(0)
        if self._end is not None:
            raise self._end
        raise StopAsyncIteration


class _Connector:
    """Play one scripted outcome per connection attempt."""

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.urls: list[str] = []

    def __call__(self, url: str):
        self.urls.append(url)
        outcome = self.outcomes.pop(0) if self.outcomes else OSError("connection refused")

        @asynccontextmanager
        async def session():
            if isinstance(outcome, BaseException):
                raise outcome
            yield outcome

        return session()


def _http_client(pages: list[list[dict]], seen: list[httpx.Request] | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if request.method != "GET":
            return httpx.Response(200, json={"message": "ok", "updated": 1})
        page = int(request.url.params.get("page", "1"))
        total = sum(len(items) for items in pages)
        return httpx.Response(
            200,
            json={
                "notifications": pages[page - 1] if page <= len(pages) else [],
                "currentPage": page,
                "totalPages": len(pages),
                "totalNotifications": total,
            },
        )

    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://testserver"
    )


def test_websocket_url_carries_token_and_scheme():
    client = NotificationClient("https://example.com/api/", "abc", http=_http_client([]))

    assert client.websocket_url() == "wss://example.com/api/notifications/ws?token=abc"


def test_backfill_merges_every_page():
    seen: list[httpx.Request] = []
    http = _http_client(
        [[_wire_notification("n-3", 3), _wire_notification("n-2", 2)], [_wire_notification("n-1", 1)]],
        seen,
    )
    client = NotificationClient("http://testserver", "abc", http=http, page_size=2)

    added = asyncio.run(client.backfill())

    assert added == 3
    assert [item.id for item in client.inbox.items()] == ["n-3", "n-2", "n-1"]
    assert [request.url.params["page"] for request in seen] == ["1", "2"]
    assert all(request.headers["Authorization"] == "Bearer abc" for request in seen)


def test_backfill_honours_page_limit():
    http = _http_client([[_wire_notification("n-2", 2)], [_wire_notification("n-1", 1)]])
    client = NotificationClient(
        "http://testserver", "abc", http=http, page_size=1, backfill_pages=1
    )

    assert asyncio.run(client.backfill()) == 1


def test_mark_read_calls_the_api_and_updates_the_inbox():
    seen: list[httpx.Request] = []
    http = _http_client([[_wire_notification("n-1")]], seen)
    client = NotificationClient("http://testserver", "abc", http=http)

    async def scenario():
        await client.backfill()
        await client.mark_read("n-1")

    asyncio.run(scenario())

    assert seen[-1].method == "PATCH"
    assert seen[-1].url.path == "/notifications/n-1/read"
    assert client.inbox.unread_count == 0


def test_run_backfills_after_ready_and_ignores_duplicate_pushes():
    http = _http_client([[_wire_notification("n-1", 1)]])
    connector = _Connector(
        _ScriptedWebSocket([READY, _push("n-1", 1), _push("n-2", 2), '{"type": "pong"}'])
    )
    client = NotificationClient(
        "http://testserver",
        "abc",
        http=http,
        connect=connector,
        max_reconnect_attempts=1,
        reconnect_interval=0,
    )

    with pytest.raises(ReconnectExhaustedError):
        asyncio.run(client.run())

    assert client.user_id == "bob"
    assert [item.id for item in client.inbox.items()] == ["n-2", "n-1"]
    assert len(connector.urls) == 2


def test_rejected_handshake_without_refresher_stops():
    rejection = ConnectionClosedError(Close(1008, "invalid_token"), None)
    connector = _Connector(_ScriptedWebSocket([], end=rejection))
    client = NotificationClient(
        "http://testserver", "stale", http=_http_client([]), connect=connector
    )

    with pytest.raises(HandshakeRejectedError) as exc_info:
        asyncio.run(client.run())

    assert exc_info.value.reason == "invalid_token"
    assert len(connector.urls) == 1


def test_rejected_handshake_renews_the_token_once():
    rejection = ConnectionClosedError(Close(1008, "expired_token"), None)
    connector = _Connector(
        _ScriptedWebSocket([], end=rejection),
        _ScriptedWebSocket([], end=ConnectionClosedError(Close(1008, "expired_token"), None)),
    )
    refreshed = []

    async def refresh_token():
        refreshed.append(True)
        return "fresh"

    client = NotificationClient(
        "http://testserver",
        "stale",
        http=_http_client([]),
        connect=connector,
        refresh_token=refresh_token,
        reconnect_interval=0,
    )

    with pytest.raises(HandshakeRejectedError):
        asyncio.run(client.run())

    assert refreshed == [True]
    assert connector.urls[0].endswith("token=stale")
    assert connector.urls[1].endswith("token=fresh")


def test_forbidden_upgrade_counts_as_rejection():
    forbidden = InvalidStatus(Response(403, "Forbidden", Headers(), b""))
    connector = _Connector(forbidden)
    client = NotificationClient(
        "http://testserver", "stale", http=_http_client([]), connect=connector
    )

    with pytest.raises(HandshakeRejectedError) as exc_info:
        asyncio.run(client.run())

    assert exc_info.value.reason == "upgrade_refused"


def test_reconnect_gives_up_after_consecutive_failures():
    connector = _Connector()
    client = NotificationClient(
        "http://testserver",
        "abc",
        http=_http_client([]),
        connect=connector,
        max_reconnect_attempts=3,
        reconnect_interval=0,
    )

    with pytest.raises(ReconnectExhaustedError):
        asyncio.run(client.run())

    assert len(connector.urls) == 3


def test_any_close_before_ready_is_a_rejection():
    connector = _Connector(
        _ScriptedWebSocket([], end=ConnectionClosedError(Close(1011, "boom"), None)),
        _ScriptedWebSocket([], end=ConnectionClosedError(Close(1011, "boom"), None)),
        _ScriptedWebSocket([], end=ConnectionClosedError(Close(1011, "boom"), None)),
    )
    refreshed = []

    async def refresh_token():
        refreshed.append(True)
        return "fresh"

    client = NotificationClient(
        "http://testserver",
        "stale",
        http=_http_client([]),
        connect=connector,
        refresh_token=refresh_token,
        max_reconnect_attempts=3,
        reconnect_interval=0,
    )

    with pytest.raises(HandshakeRejectedError) as exc_info:
        asyncio.run(client.run())

    assert exc_info.value.reason == "boom"
    assert refreshed == [True]
    assert connector.urls[1].endswith("token=fresh")
    assert len(connector.urls) == 2


def test_close_without_frame_before_ready_is_a_rejection():
    connector = _Connector(_ScriptedWebSocket([]))
    client = NotificationClient(
        "http://testserver", "stale", http=_http_client([]), connect=connector
    )

    with pytest.raises(HandshakeRejectedError) as exc_info:
        asyncio.run(client.run())

    assert exc_info.value.reason is None
    assert len(connector.urls) == 1
