"""SQLAlchemy models for friend requests and friendships."""

from sqlalchemy import Column, DateTime, ForeignKey, String

from friendbook.infrastructure.database import Base, generate_id
from friendbook.utils import storage_now


class FriendRequestModel(Base):
    __tablename__ = "friend_request"

    id = Column(String(36), primary_key=True, default=generate_id)
    sender_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    receiver_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime, nullable=False, default=storage_now)
    updated_at = Column(DateTime, nullable=True, onupdate=storage_now)


class FriendshipModel(Base):
    __tablename__ = "friendship"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_a_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    user_b_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=storage_now)
