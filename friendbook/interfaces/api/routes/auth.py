"""Endpoints for registration and access token issuance."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from friendbook.application.use_cases.users import (
    AuthenticationStatus,
    authenticate_user,
    register_user,
)
from friendbook.infrastructure.database import get_db
from friendbook.infrastructure.security import create_access_token, refresh_access_token
from friendbook.interfaces.api.dependencies import oauth2_scheme
from friendbook.interfaces.api.routes_helpers import to_http_exception
from friendbook.interfaces.api.schemas import Token, UserRead, UserRegister

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    """Create a new account."""

    try:
        user = register_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            profile_image_url=payload.profile_image_url,
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    logger.info("Registered user %s", user.id)
    return UserRead.model_validate(user)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """Authenticate by email and password and return a bearer token."""

    result = authenticate_user(db, email=form_data.username, password=form_data.password)

    if result.status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if result.status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("Issued access token for user %s", result.user.id)
    return {"access_token": create_access_token(result.user.id), "token_type": "bearer"}


@router.post("/token/refresh", response_model=Token)
def refresh_token(token: str = Depends(oauth2_scheme)):
    """Exchange a still valid token for one with a renewed expiry."""

    try:
        refreshed = refresh_access_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    return {"access_token": refreshed, "token_type": "bearer"}
