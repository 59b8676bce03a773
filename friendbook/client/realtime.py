"""Client that combines the durable notification list with realtime pushes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

import httpx
import websockets
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidStatus

from friendbook.infrastructure.notifications.envelope import (
    PushEnvelope,
    ReadyEnvelope,
    parse_server_envelope,
)
from friendbook.interfaces.api.schemas.notification import NotificationListResponse

from .inbox import NotificationInbox

logger = logging.getLogger(__name__)

POLICY_VIOLATION = 1008
DEFAULT_RECONNECT_ATTEMPTS = 10
DEFAULT_RECONNECT_INTERVAL = 3.0

TokenRefresher = Callable[[], Awaitable[str | None]]
Connector = Callable[[str], AbstractAsyncContextManager[Any]]


class HandshakeRejectedError(Exception):
    """The server refused the websocket credential."""

    def __init__(self, reason: str | None) -> None:
        super().__init__(reason or "handshake rejected")
        self.reason = reason


class ReconnectExhaustedError(ConnectionError):
    """The realtime channel could not be re-established within the retry budget."""


class NotificationClient:
    """Keep a :class:`NotificationInbox` converged with the server.

    Every time the websocket reaches the ``ready`` state the durable list is
    fetched again, so pushes missed while disconnected are recovered. Dropped
    connections are retried up to ``max_reconnect_attempts`` consecutive times,
    ``reconnect_interval`` seconds apart.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        http: httpx.AsyncClient | None = None,
        connect: Connector | None = None,
        inbox: NotificationInbox | None = None,
        refresh_token: TokenRefresher | None = None,
        max_reconnect_attempts: int = DEFAULT_RECONNECT_ATTEMPTS,
        reconnect_interval: float = DEFAULT_RECONNECT_INTERVAL,
        page_size: int = 20,
        backfill_pages: int | None = None,
        websocket_path: str = "/notifications/ws",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.inbox = inbox or NotificationInbox()
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(10.0),
        )
        self.user_id: str | None = None
        self.max_reconnect_attempts = max_reconnect_attempts
        self.reconnect_interval = reconnect_interval
        self.page_size = page_size
        self.backfill_pages = backfill_pages
        self._connect: Connector = connect or websockets.connect
        self._refresh_token = refresh_token
        self._websocket_path = websocket_path

    async def aclose(self) -> None:
        await self.http.aclose()

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def websocket_url(self) -> str:
        parts = urlsplit(self.base_url)
        scheme = "wss" if parts.scheme == "https" else "ws"
        path = parts.path.rstrip("/") + self._websocket_path
        return urlunsplit((scheme, parts.netloc, path, urlencode({"token": self.token}), ""))

    async def fetch_page(
        self, page: int = 1, *, is_read: bool | None = None
    ) -> NotificationListResponse:
        params: dict[str, Any] = {"page": page, "limit": self.page_size}
        if is_read is not None:
            params["isRead"] = "true" if is_read else "false"
        response = await self.http.get("/notifications/", params=params, headers=self._headers())
        response.raise_for_status()
        return NotificationListResponse.model_validate(response.json())

    async def backfill(self) -> int:
        """Merge the durable list into the inbox; return how many ids were new."""

        added = 0
        page = 1
        while True:
            result = await self.fetch_page(page)
            added += self.inbox.merge_backfill(result.notifications)
            if not result.notifications or page >= result.total_pages:
                break
            if self.backfill_pages is not None and page >= self.backfill_pages:
                break
            page += 1
        return added

    async def mark_read(self, notification_id: str) -> None:
        response = await self.http.patch(
            f"/notifications/{notification_id}/read", headers=self._headers()
        )
        response.raise_for_status()
        self.inbox.mark_read(notification_id)

    async def mark_all_read(self) -> None:
        response = await self.http.put("/notifications/read-all", headers=self._headers())
        response.raise_for_status()
        self.inbox.mark_all_read()

    def handle_frame(self, raw: str | bytes) -> bool:
        """Apply one server frame; return ``True`` when it added a notification."""

        envelope = parse_server_envelope(raw)
        if isinstance(envelope, PushEnvelope):
            return self.inbox.apply_push(envelope)
        return False

    async def run(self) -> None:
        """Maintain the realtime channel until cancelled.

        Raises :class:`HandshakeRejectedError` when the credential is refused
        and no fresh one can be obtained, and :class:`ReconnectExhaustedError`
        once the retry budget is spent.
        """

        failures = 0
        renewed = False
        while True:
            try:
                reached_ready = await self._run_session()
            except HandshakeRejectedError as exc:
                logger.warning("Notification websocket rejected: %s", exc.reason)
                if renewed or not await self._renew_token():
                    raise
                renewed = True
                continue
            except (OSError, InvalidHandshake, ConnectionClosed) as exc:
                logger.warning("Notification websocket unavailable: %s", exc)
                reached_ready = False

            if reached_ready:
                failures = 0
                renewed = False
            else:
                failures += 1
                if failures >= self.max_reconnect_attempts:
                    raise ReconnectExhaustedError(
                        f"Gave up after {failures} failed connection attempts"
                    )
            await asyncio.sleep(self.reconnect_interval)

    async def _renew_token(self) -> bool:
        if self._refresh_token is None:
            return False
        token = await self._refresh_token()
        if not token:
            return False
        self.token = token
        return True

    async def _run_session(self) -> bool:
        ready = False
        try:
            async with self._connect(self.websocket_url()) as websocket:
                while not ready:
                    envelope = parse_server_envelope(await websocket.recv())
                    if isinstance(envelope, ReadyEnvelope):
                        ready = True
                        self.user_id = envelope.payload.user_id
                        logger.info("Notification websocket ready for user %s", self.user_id)

                try:
                    await self.backfill()
                except httpx.HTTPError as exc:
                    logger.warning("Notification backfill failed: %s", exc)

                async for raw in websocket:
                    self.handle_frame(raw)
        except InvalidStatus as exc:
            if exc.response.status_code == 403:
                raise HandshakeRejectedError("upgrade_refused") from exc
            raise
        except ConnectionClosed as exc:
            if ready:
                logger.info("Notification websocket dropped: %s", exc)
                return True
            # A close before ``ready`` is a rejected credential, whatever the code.
            if exc.rcvd is not None and exc.rcvd.code != POLICY_VIOLATION:
                logger.info("Websocket closed with %s before ready", exc.rcvd.code)
            raise HandshakeRejectedError(exc.rcvd.reason if exc.rcvd else None) from exc
        return ready


__all__ = [
    "HandshakeRejectedError",
    "NotificationClient",
    "ReconnectExhaustedError",
]
