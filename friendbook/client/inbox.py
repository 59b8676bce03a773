"""Local, id-keyed copy of a user's notifications."""

from __future__ import annotations

from collections.abc import Iterable

from friendbook.infrastructure.notifications.envelope import (
    NotificationPayload,
    PushEnvelope,
)


class NotificationInbox:
    """Merge backfilled pages and realtime pushes without duplicating events.

    The durable list is authoritative: a backfilled copy replaces whatever was
    stored for the same id, while a push for an id that is already known is
    ignored.
    """

    def __init__(self) -> None:
        self._items: dict[str, NotificationPayload] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def merge_backfill(self, notifications: Iterable[NotificationPayload]) -> int:
        """Store every backfilled notification; return how many ids were new."""

        added = 0
        for notification in notifications:
            if notification.id not in self._items:
                added += 1
            self._items[notification.id] = notification
        return added

    def apply_push(self, envelope: PushEnvelope) -> bool:
        """Insert the pushed notification unless its id is already present."""

        notification = envelope.payload
        if notification.id in self._items:
            return False
        self._items[notification.id] = notification
        return True

    def items(self) -> list[NotificationPayload]:
        """Return the notifications newest first."""

        return sorted(
            self._items.values(),
            key=lambda item: (item.created_at, item.id),
            reverse=True,
        )

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items.values() if not item.is_read)

    def mark_read(self, notification_id: str) -> None:
        item = self._items.get(notification_id)
        if item is not None and not item.is_read:
            self._items[notification_id] = item.model_copy(update={"is_read": True})

    def mark_all_read(self) -> None:
        for notification_id in list(self._items):
            self.mark_read(notification_id)


__all__ = ["NotificationInbox"]
