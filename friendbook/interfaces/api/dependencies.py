"""FastAPI dependency utilities."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from friendbook.domain.entities import User
from friendbook.infrastructure.database import get_db
from friendbook.infrastructure.notifications import EventDispatcher
from friendbook.infrastructure.repositories import UserRepository
from friendbook.infrastructure.security import TokenExpiredError, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

HANDSHAKE_MISSING_TOKEN = "missing_token"
HANDSHAKE_INVALID_TOKEN = "invalid_token"
HANDSHAKE_EXPIRED_TOKEN = "expired_token"
HANDSHAKE_MALFORMED_TOKEN = "malformed_token"
HANDSHAKE_UNKNOWN_USER = "unknown_user"
HANDSHAKE_INACTIVE_USER = "inactive_user"


class HandshakeRejected(Exception):
    """Raised when a websocket credential cannot be resolved to an active user."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def authenticate_websocket_token(token: str | None, db: Session) -> User:
    """Resolve the user presented by a websocket ``token`` query parameter.

    Verification goes through the same decoder as the REST bearer tokens.
    """

    if not token:
        raise HandshakeRejected(HANDSHAKE_MISSING_TOKEN)
    try:
        payload = decode_access_token(token)
    except TokenExpiredError as exc:
        raise HandshakeRejected(HANDSHAKE_EXPIRED_TOKEN) from exc
    except ValueError as exc:
        raise HandshakeRejected(HANDSHAKE_INVALID_TOKEN) from exc

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise HandshakeRejected(HANDSHAKE_MALFORMED_TOKEN)

    user = UserRepository(db).get(user_id)
    if user is None:
        raise HandshakeRejected(HANDSHAKE_UNKNOWN_USER)
    if not user.is_active:
        raise HandshakeRejected(HANDSHAKE_INACTIVE_USER)
    return user


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized: Invalid token",
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_exception() from exc

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise _credentials_exception()

    user = UserRepository(db).get(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def get_event_dispatcher(request: Request) -> EventDispatcher:
    """Return the dispatcher created by the application lifespan."""

    return request.app.state.event_dispatcher
