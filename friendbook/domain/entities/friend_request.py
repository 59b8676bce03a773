"""Domain entities for friend requests and established friendships."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

FRIEND_REQUEST_PENDING = "pending"
FRIEND_REQUEST_ACCEPTED = "accepted"
FRIEND_REQUEST_REJECTED = "rejected"


@dataclass
class FriendRequest:
    """Request from ``sender_id`` to ``receiver_id`` to become friends."""

    id: str | None
    sender_id: str
    receiver_id: str
    status: str
    created_at: datetime | None = None

    def is_pending(self) -> bool:
        return self.status == FRIEND_REQUEST_PENDING


@dataclass
class Friendship:
    id: str | None
    user_a_id: str
    user_b_id: str
    created_at: datetime | None = None

    def other_user_id(self, user_id: str) -> str:
        """Return the identifier of the friend that is not ``user_id``."""

        return self.user_b_id if self.user_a_id == user_id else self.user_a_id
