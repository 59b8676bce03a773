"""Routes for friend requests and friend lists."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from friendbook.application.use_cases.friends import (
    accept_friend_request,
    list_friends,
    list_pending_friend_requests,
    reject_friend_request,
    send_friend_request,
)
from friendbook.domain.entities import User
from friendbook.infrastructure.database import get_db
from friendbook.infrastructure.notifications import EventDispatcher
from friendbook.interfaces.api.dependencies import (
    get_current_active_user,
    get_event_dispatcher,
)
from friendbook.interfaces.api.routes_helpers import to_http_exception
from friendbook.interfaces.api.schemas import (
    FriendRequestRead,
    PendingFriendRequestsRead,
    UserRead,
)

router = APIRouter(prefix="/friends", tags=["friends"])


@router.get("/", response_model=list[UserRead])
def read_friends(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return [UserRead.model_validate(friend) for friend in list_friends(db, user_id=current_user.id)]


@router.get("/requests", response_model=PendingFriendRequestsRead)
def read_pending_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    received, sent = list_pending_friend_requests(db, user_id=current_user.id)
    return PendingFriendRequestsRead(
        received=[FriendRequestRead.model_validate(item) for item in received],
        sent=[FriendRequestRead.model_validate(item) for item in sent],
    )


@router.post(
    "/requests/{receiver_id}",
    response_model=FriendRequestRead,
    status_code=status.HTTP_201_CREATED,
)
def create_friend_request(
    receiver_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    """Send a friend request to ``receiver_id``."""

    try:
        friend_request = send_friend_request(
            db, dispatcher, sender_id=current_user.id, receiver_id=receiver_id
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return FriendRequestRead.model_validate(friend_request)


@router.post("/requests/{request_id}/accept", response_model=FriendRequestRead)
def accept_request(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    try:
        friend_request = accept_friend_request(
            db, dispatcher, request_id=request_id, receiver=current_user
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return FriendRequestRead.model_validate(friend_request)


@router.post("/requests/{request_id}/reject", response_model=FriendRequestRead)
def reject_request(
    request_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    try:
        friend_request = reject_friend_request(
            db, dispatcher, request_id=request_id, receiver=current_user
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return FriendRequestRead.model_validate(friend_request)
