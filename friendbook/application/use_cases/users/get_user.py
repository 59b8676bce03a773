"""Use case for retrieving a single user."""

from sqlalchemy.orm import Session

from friendbook.application.errors import NotFoundError
from friendbook.domain.entities import User
from friendbook.infrastructure.repositories import UserRepository


def get_user(session: Session, user_id: str) -> User:
    user = UserRepository(session).get(user_id)
    if user is None or not user.is_active:
        raise NotFoundError("User not found")
    return user
