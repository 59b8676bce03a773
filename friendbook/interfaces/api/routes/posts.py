"""Routes for posts and post likes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from friendbook.application.use_cases.posts import create_post, get_post, like_post
from friendbook.domain.entities import User
from friendbook.infrastructure.database import get_db
from friendbook.infrastructure.notifications import EventDispatcher
from friendbook.interfaces.api.dependencies import (
    get_current_active_user,
    get_event_dispatcher,
)
from friendbook.interfaces.api.routes_helpers import to_http_exception
from friendbook.interfaces.api.schemas import PostCreate, PostRead

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def publish_post(
    payload: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    try:
        post = create_post(
            db,
            dispatcher,
            author=current_user,
            text=payload.text,
            tagged_user_ids=payload.tagged_user_ids,
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return PostRead.model_validate(post)


@router.get("/{post_id}", response_model=PostRead)
def read_post(
    post_id: str,
    db: Session = Depends(get_db),
    _: User = Depends(get_current_active_user),
):
    try:
        post = get_post(db, post_id)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return PostRead.model_validate(post)


@router.post("/{post_id}/like", response_model=PostRead)
def toggle_post_like(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    """Like the post, or remove the like when it is already present."""

    try:
        post = like_post(db, dispatcher, post_id=post_id, user=current_user)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return PostRead.model_validate(post)
