"""Use cases related to user accounts."""

from .authenticate_user import (
    AuthenticationResult,
    AuthenticationStatus,
    authenticate_user,
)
from .get_user import get_user
from .register_user import register_user

__all__ = [
    "AuthenticationResult",
    "AuthenticationStatus",
    "authenticate_user",
    "get_user",
    "register_user",
]
