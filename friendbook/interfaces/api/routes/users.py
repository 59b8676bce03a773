"""Routes exposing user profiles."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from friendbook.application.use_cases.users import get_user
from friendbook.domain.entities import User
from friendbook.infrastructure.database import get_db
from friendbook.interfaces.api.dependencies import get_current_active_user
from friendbook.interfaces.api.routes_helpers import to_http_exception
from friendbook.interfaces.api.schemas import UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_active_user)):
    return UserRead.model_validate(current_user)


@router.get("/{user_id}", response_model=UserRead)
def read_user(
    user_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
):
    try:
        user = get_user(db, user_id)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return UserRead.model_validate(user)
