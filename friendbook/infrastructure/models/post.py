"""SQLAlchemy models for posts, their likes and tagged users."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from friendbook.infrastructure.database import Base, generate_id
from friendbook.utils import storage_now

post_like_table = Table(
    "post_like",
    Base.metadata,
    Column("post_id", String(36), ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
)

post_tag_table = Table(
    "post_tag",
    Base.metadata,
    Column("post_id", String(36), ForeignKey("post.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(36), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
)


class PostModel(Base):
    __tablename__ = "post"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("user.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=storage_now)

    liked_by = relationship("UserModel", secondary=post_like_table, lazy="selectin")
    tagged_users = relationship("UserModel", secondary=post_tag_table, lazy="selectin")
