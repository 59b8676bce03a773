"""SQLAlchemy model for the user table."""

from sqlalchemy import Boolean, Column, DateTime, String, Text

from friendbook.infrastructure.database import Base, generate_id
from friendbook.utils import storage_now


class UserModel(Base):
    """Database representation of a registered user."""

    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(100), nullable=False)
    email = Column(String(120), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    profile_image_url = Column(String(500), nullable=True)
    bio = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=storage_now)
