"""SQLAlchemy models for comments and comment likes."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from friendbook.infrastructure.database import Base, generate_id
from friendbook.utils import storage_now

comment_like_table = Table(
    "comment_like",
    Base.metadata,
    Column(
        "comment_id", String(36), ForeignKey("comment.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("user_id", String(36), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
)


class CommentModel(Base):
    __tablename__ = "comment"

    id = Column(String(36), primary_key=True, default=generate_id)
    post_id = Column(String(36), ForeignKey("post.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=storage_now)

    liked_by = relationship("UserModel", secondary=comment_like_table, lazy="selectin")
