"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterable

from sqlalchemy.orm import Session

from friendbook.domain.entities import Notification, NotificationKind, SenderSummary
from friendbook.infrastructure.models import NotificationModel
from friendbook.utils import from_storage_datetime, to_storage_datetime, utc_now


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_recipient(
        self,
        recipient_id: str,
        *,
        page: int = 1,
        limit: int = 10,
        is_read: bool | None = None,
    ) -> tuple[Sequence[Notification], int]:
        """Return one page of notifications, newest first, and the total count."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == recipient_id
        )
        if is_read is not None:
            query = query.filter(NotificationModel.is_read.is_(is_read))
        total = query.count()
        models = (
            query.order_by(
                NotificationModel.created_at.desc(), NotificationModel.id.desc()
            )
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models], total

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        model.created_at = to_storage_datetime(
            notification.created_at or utc_now()
        )
        model.recipient_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.type = notification.kind.value
        model.related_id = notification.related_id
        model.message = notification.message
        model.is_read = notification.is_read
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def mark_as_read(self, notification_ids: Iterable[str], *, recipient_id: str) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.recipient_id == recipient_id,
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def mark_all_as_read(self, recipient_id: str) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        sender = None
        if model.sender is not None:
            sender = SenderSummary(
                id=model.sender.id,
                name=model.sender.name,
                profile_image_url=model.sender.profile_image_url,
            )
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            sender_id=model.sender_id,
            kind=NotificationKind(model.type),
            related_id=model.related_id,
            message=model.message,
            is_read=bool(model.is_read),
            created_at=from_storage_datetime(model.created_at),
            sender=sender,
        )


__all__ = ["NotificationRepository"]
