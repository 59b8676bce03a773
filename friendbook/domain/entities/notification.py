"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotificationKind(str, Enum):
    """Closed set of state changes a recipient can be notified about."""

    FRIEND_REQUEST = "friendRequest"
    FRIEND_REQUEST_ACCEPTED = "friendRequestAccepted"
    FRIEND_REQUEST_REJECTED = "friendRequestRejected"
    POST_LIKED = "postLiked"
    COMMENT_LIKED = "commentLiked"
    POST_COMMENTED = "postCommented"
    USER_TAGGED = "userTagged"
    NEW_MESSAGE = "newMessage"


@dataclass(frozen=True)
class SenderSummary:
    """Minimal description of the user who triggered a notification."""

    id: str
    name: str
    profile_image_url: str | None = None


@dataclass
class Notification:
    """Durable record of a state change delivered to ``recipient_id``."""

    id: str | None
    recipient_id: str
    sender_id: str
    kind: NotificationKind
    related_id: str
    message: str | None
    is_read: bool = False
    created_at: datetime | None = None
    sender: SenderSummary | None = None


__all__ = ["Notification", "NotificationKind", "SenderSummary"]
