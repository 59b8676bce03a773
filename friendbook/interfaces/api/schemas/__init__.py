from .auth import Token, UserRegister
from .comment import CommentCreate, CommentRead
from .friend import FriendRequestRead, PendingFriendRequestsRead
from .message import MessageCreate, MessageRead
from .notification import (
    NotificationActionResponse,
    NotificationListResponse,
)
from .post import PostCreate, PostRead
from .user import UserRead

__all__ = [
    "Token",
    "UserRegister",
    "CommentCreate",
    "CommentRead",
    "FriendRequestRead",
    "PendingFriendRequestsRead",
    "MessageCreate",
    "MessageRead",
    "NotificationActionResponse",
    "NotificationListResponse",
    "PostCreate",
    "PostRead",
    "UserRead",
]
