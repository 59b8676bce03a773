"""Friend request schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class FriendRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    sender_id: str
    receiver_id: str
    status: str
    created_at: datetime | None = None


class PendingFriendRequestsRead(BaseModel):
    received: list[FriendRequestRead]
    sent: list[FriendRequestRead]
