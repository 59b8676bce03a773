"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging

import anyio
from fastapi import (
    APIRouter,
    Depends,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from friendbook.application.use_cases.notifications import (
    list_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
    mark_notifications_as_read,
)
from friendbook.config import get_settings
from friendbook.domain.entities import User
from friendbook.infrastructure.database import SessionLocal, get_db
from friendbook.infrastructure.notifications import (
    Connection,
    ConnectionRegistry,
    PongEnvelope,
    ReadyEnvelope,
    ReadyPayload,
    build_notification_payload,
    dump_envelope,
)
from friendbook.interfaces.api.dependencies import (
    HandshakeRejected,
    authenticate_websocket_token,
    get_current_active_user,
)
from friendbook.interfaces.api.routes_helpers import to_http_exception
from friendbook.interfaces.api.schemas import (
    NotificationActionResponse,
    NotificationListResponse,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)

HANDSHAKE_TIMEOUT_REASON = "handshake_timeout"


@router.get(
    "/",
    response_model=NotificationListResponse,
    response_model_exclude_none=True,
)
def read_notifications(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    is_read: bool | None = Query(None, alias="isRead"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Return the caller's notifications, newest first, with page metadata."""

    settings = get_settings()
    page_size = min(limit or settings.notifications_page_size, settings.notifications_max_page_size)
    try:
        result = list_notifications(
            db,
            recipient_id=current_user.id,
            page=page,
            limit=page_size,
            is_read=is_read,
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc

    return NotificationListResponse(
        notifications=[build_notification_payload(item) for item in result.items],
        current_page=result.page,
        total_pages=result.total_pages,
        total_notifications=result.total,
    )


@router.patch("/{notification_id}/read", response_model=NotificationActionResponse)
def read_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    try:
        mark_notification_as_read(
            db, notification_id=notification_id, recipient_id=current_user.id
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return NotificationActionResponse(message="Notification marked as read", updated=1)


@router.put("/read-all", response_model=NotificationActionResponse)
def read_all_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    updated = mark_all_notifications_as_read(db, recipient_id=current_user.id)
    return NotificationActionResponse(
        message="All notifications marked as read", updated=updated
    )


def _authenticate(token: str | None) -> User:
    session = SessionLocal()
    try:
        return authenticate_websocket_token(token, session)
    finally:
        session.close()


def _acknowledge(user_id: str, ids: list[str]) -> None:
    session = SessionLocal()
    try:
        mark_notifications_as_read(session, notification_ids=ids, recipient_id=user_id)
    finally:
        session.close()


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that pushes new notifications to the authenticated user."""

    registry: ConnectionRegistry = websocket.app.state.connection_registry
    timeout = get_settings().websocket_handshake_timeout_seconds
    token = websocket.query_params.get("token")

    try:
        with anyio.fail_after(timeout):
            user = await run_in_threadpool(_authenticate, token)
    except HandshakeRejected as exc:
        logger.info("Websocket handshake rejected: %s", exc.reason)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=exc.reason)
        return
    except TimeoutError:
        logger.warning("Websocket handshake exceeded %.1f seconds", timeout)
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION, reason=HANDSHAKE_TIMEOUT_REASON
        )
        return
    except Exception:
        logger.exception("Unexpected error while authenticating websocket")
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    await websocket.accept()
    connection = Connection(websocket, user.id)
    registry.register(connection)
    try:
        await connection.send_json(
            dump_envelope(ReadyEnvelope(payload=ReadyPayload(user_id=user.id)))
        )
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except (ValueError, KeyError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await connection.send_json(dump_envelope(PongEnvelope()))
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list) and ids:
                    await run_in_threadpool(_acknowledge, user.id, [str(i) for i in ids])
                continue
    except WebSocketDisconnect:
        logger.debug("Websocket for user %s disconnected", user.id)
    finally:
        connection.mark_closed()
        registry.unregister(connection)
