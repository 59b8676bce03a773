"""ORM models used by the application infrastructure."""

from .comment import CommentModel, comment_like_table
from .friend_request import FriendRequestModel, FriendshipModel
from .message import MessageModel
from .notification import NotificationModel
from .post import PostModel, post_like_table, post_tag_table
from .user import UserModel

__all__ = [
    "CommentModel",
    "comment_like_table",
    "FriendRequestModel",
    "FriendshipModel",
    "MessageModel",
    "NotificationModel",
    "PostModel",
    "post_like_table",
    "post_tag_table",
    "UserModel",
]
