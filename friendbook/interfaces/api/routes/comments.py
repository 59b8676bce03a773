"""Routes for comments and comment likes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from friendbook.application.use_cases.comments import create_comment, like_comment
from friendbook.domain.entities import User
from friendbook.infrastructure.database import get_db
from friendbook.infrastructure.notifications import EventDispatcher
from friendbook.interfaces.api.dependencies import (
    get_current_active_user,
    get_event_dispatcher,
)
from friendbook.interfaces.api.routes_helpers import to_http_exception
from friendbook.interfaces.api.schemas import CommentCreate, CommentRead

router = APIRouter(tags=["comments"])


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
def comment_on_post(
    post_id: str,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    try:
        comment = create_comment(
            db, dispatcher, post_id=post_id, author=current_user, content=payload.content
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return CommentRead.model_validate(comment)


@router.post("/comments/{comment_id}/like", response_model=CommentRead)
def toggle_comment_like(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    try:
        comment = like_comment(db, dispatcher, comment_id=comment_id, user=current_user)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return CommentRead.model_validate(comment)
