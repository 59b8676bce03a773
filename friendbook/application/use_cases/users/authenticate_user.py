"""Credential check behind the password login endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from friendbook.domain.entities import User
from friendbook.infrastructure.repositories import UserRepository
from friendbook.infrastructure.security import verify_password


class AuthenticationStatus(str, Enum):
    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class AuthenticationResult:
    status: AuthenticationStatus
    user: User | None = None


def authenticate_user(session: Session, *, email: str, password: str) -> AuthenticationResult:
    """Check ``email`` and ``password`` against the stored account.

    Unknown emails and wrong passwords share one status so the response does
    not reveal which accounts exist. Deactivated accounts are only reported
    once the password matched.
    """

    user = UserRepository(session).get_by_email(email)
    if user is None or not verify_password(password, user.password):
        return AuthenticationResult(AuthenticationStatus.INVALID_CREDENTIALS)
    if not user.is_active:
        return AuthenticationResult(AuthenticationStatus.INACTIVE, user)
    return AuthenticationResult(AuthenticationStatus.SUCCESS, user)
