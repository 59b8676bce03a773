"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from friendbook.infrastructure.database import Base, generate_id
from friendbook.utils import storage_now


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"

    id = Column(String(36), primary_key=True, default=generate_id)
    recipient_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    sender_id = Column(String(36), ForeignKey("user.id"), nullable=False)
    type = Column(String(40), nullable=False)
    related_id = Column(String(36), nullable=False)
    message = Column(Text, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, default=storage_now)

    sender = relationship("UserModel", foreign_keys=[sender_id], lazy="joined")


__all__ = ["NotificationModel"]
