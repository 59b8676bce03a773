"""Domain entities exposed by the application."""

from .comment import Comment
from .friend_request import (
    FRIEND_REQUEST_ACCEPTED,
    FRIEND_REQUEST_PENDING,
    FRIEND_REQUEST_REJECTED,
    FriendRequest,
    Friendship,
)
from .message import Message
from .notification import Notification, NotificationKind, SenderSummary
from .post import Post
from .user import User

__all__ = [
    "Comment",
    "FriendRequest",
    "Friendship",
    "FRIEND_REQUEST_PENDING",
    "FRIEND_REQUEST_ACCEPTED",
    "FRIEND_REQUEST_REJECTED",
    "Message",
    "Notification",
    "NotificationKind",
    "SenderSummary",
    "Post",
    "User",
]
