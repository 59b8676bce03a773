"""Public helpers for emitting and reading notifications."""

from .events import create_notification
from .queries import (
    NotificationPage,
    list_notifications,
    mark_all_notifications_as_read,
    mark_notification_as_read,
    mark_notifications_as_read,
)

__all__ = [
    "create_notification",
    "NotificationPage",
    "list_notifications",
    "mark_all_notifications_as_read",
    "mark_notification_as_read",
    "mark_notifications_as_read",
]
