"""Read and acknowledge the durable notification list."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.orm import Session

from friendbook.application.errors import NotFoundError, PermissionDeniedError
from friendbook.domain.entities import Notification
from friendbook.infrastructure.repositories import NotificationRepository


@dataclass(frozen=True)
class NotificationPage:
    items: Sequence[Notification]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def list_notifications(
    session: Session,
    *,
    recipient_id: str,
    page: int = 1,
    limit: int = 10,
    is_read: bool | None = None,
) -> NotificationPage:
    """Return one page of ``recipient_id``'s notifications, newest first."""

    if page < 1:
        raise ValueError("page must be greater than or equal to 1")
    if limit < 1:
        raise ValueError("limit must be greater than or equal to 1")

    items, total = NotificationRepository(session).list_for_recipient(
        recipient_id, page=page, limit=limit, is_read=is_read
    )
    return NotificationPage(items=items, page=page, limit=limit, total=total)


def mark_notification_as_read(
    session: Session, *, notification_id: str, recipient_id: str
) -> Notification:
    repository = NotificationRepository(session)
    notification = repository.get(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.recipient_id != recipient_id:
        raise PermissionDeniedError(
            "You are not authorized to mark this notification as read"
        )
    if not notification.is_read:
        repository.mark_as_read([notification_id], recipient_id=recipient_id)
        notification.is_read = True
    return notification


def mark_notifications_as_read(
    session: Session, *, notification_ids: Iterable[str], recipient_id: str
) -> int:
    """Mark the given notifications read, ignoring ids owned by other users."""

    unique_ids = list(dict.fromkeys(str(notification_id) for notification_id in notification_ids))
    return NotificationRepository(session).mark_as_read(unique_ids, recipient_id=recipient_id)


def mark_all_notifications_as_read(session: Session, *, recipient_id: str) -> int:
    return NotificationRepository(session).mark_all_as_read(recipient_id)


__all__ = [
    "NotificationPage",
    "list_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
    "mark_notifications_as_read",
]
