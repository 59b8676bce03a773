"""SQLAlchemy model for direct messages."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from friendbook.infrastructure.database import Base, generate_id
from friendbook.utils import storage_now


class MessageModel(Base):
    __tablename__ = "message"

    id = Column(String(36), primary_key=True, default=generate_id)
    sender_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    receiver_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=storage_now)
