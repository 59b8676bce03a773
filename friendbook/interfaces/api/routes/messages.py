"""Routes for direct messages."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from friendbook.application.use_cases.messages import list_conversation, send_message
from friendbook.domain.entities import User
from friendbook.infrastructure.database import get_db
from friendbook.infrastructure.notifications import EventDispatcher
from friendbook.interfaces.api.dependencies import (
    get_current_active_user,
    get_event_dispatcher,
)
from friendbook.interfaces.api.routes_helpers import to_http_exception
from friendbook.interfaces.api.schemas import MessageCreate, MessageRead

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("/{receiver_id}", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def post_message(
    receiver_id: str,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    try:
        message = send_message(
            db,
            dispatcher,
            sender=current_user,
            receiver_id=receiver_id,
            content=payload.content,
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return MessageRead.model_validate(message)


@router.get("/{other_user_id}", response_model=list[MessageRead])
def read_conversation(
    other_user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    messages = list_conversation(db, user_id=current_user.id, other_user_id=other_user_id)
    return [MessageRead.model_validate(message) for message in messages]
