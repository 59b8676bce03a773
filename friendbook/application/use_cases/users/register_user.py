"""Use case for registering users."""

from sqlalchemy.orm import Session

from friendbook.application.errors import ConflictError
from friendbook.domain.entities import User
from friendbook.infrastructure.repositories import UserRepository
from friendbook.infrastructure.security import get_password_hash


def register_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    profile_image_url: str | None = None,
) -> User:
    """Create a new user ensuring unique email addresses."""

    repository = UserRepository(session)
    if repository.get_by_email(email):
        raise ConflictError("User already exists")

    user = User(
        id=None,
        name=name.strip(),
        email=email,
        password=get_password_hash(password),
        profile_image_url=profile_image_url,
        bio=None,
        is_active=True,
        created_at=None,
    )
    return repository.create(user)
