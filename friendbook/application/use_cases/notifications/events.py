"""Utility helpers to persist and dispatch notifications."""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from friendbook.domain.entities import Notification, NotificationKind
from friendbook.infrastructure.notifications import NotificationDispatcher
from friendbook.infrastructure.repositories import NotificationRepository
from friendbook.utils import utc_now

logger = logging.getLogger(__name__)


def create_notification(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    recipient_id: str,
    sender_id: str,
    kind: NotificationKind,
    related_id: str,
    message: str,
) -> Notification | None:
    """Persist a notification for ``recipient_id`` and push it if they are online.

    Users are never notified about their own actions. A failure to store the
    record is logged and swallowed so the action that triggered it keeps its
    committed result.
    """

    if recipient_id == sender_id:
        return None

    notification = Notification(
        id=None,
        recipient_id=recipient_id,
        sender_id=sender_id,
        kind=kind,
        related_id=related_id,
        message=message,
        is_read=False,
        created_at=utc_now(),
    )
    try:
        saved = NotificationRepository(session).create(notification)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Could not store %s notification for user %s", kind.value, recipient_id
        )
        return None

    dispatcher.dispatch(saved)
    return saved


__all__ = ["create_notification"]
