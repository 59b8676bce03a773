"""Friend request workflow and the notifications it emits."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from friendbook.application.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from friendbook.application.use_cases.notifications import create_notification
from friendbook.domain.entities import (
    FRIEND_REQUEST_ACCEPTED,
    FRIEND_REQUEST_PENDING,
    FRIEND_REQUEST_REJECTED,
    FriendRequest,
    NotificationKind,
    User,
)
from friendbook.infrastructure.notifications import NotificationDispatcher
from friendbook.infrastructure.repositories import FriendRequestRepository, UserRepository

logger = logging.getLogger(__name__)


def send_friend_request(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    sender_id: str,
    receiver_id: str,
) -> FriendRequest:
    """Send (or reactivate) a friend request from ``sender_id`` to ``receiver_id``."""

    if sender_id == receiver_id:
        raise ValueError("Cannot send a friend request to yourself")

    users = UserRepository(session).get_map_by_ids([sender_id, receiver_id])
    sender = users.get(sender_id)
    if receiver_id not in users or sender is None:
        raise NotFoundError("User not found")

    repository = FriendRequestRepository(session)
    if repository.get_friendship(sender_id, receiver_id) is not None:
        raise ConflictError("You are already friends with this user")

    existing = repository.find_between(sender_id, receiver_id)
    if existing is not None and existing.is_pending():
        if existing.sender_id == sender_id:
            raise ConflictError("You have already sent a friend request to this user.")
        raise ConflictError(
            "You have a pending friend request from this user. Please accept or reject it."
        )

    if existing is not None:
        existing.sender_id = sender_id
        existing.receiver_id = receiver_id
        existing.status = FRIEND_REQUEST_PENDING
        friend_request = repository.update(existing)
        logger.info("Reactivated friend request %s", friend_request.id)
    else:
        friend_request = repository.create(
            FriendRequest(
                id=None,
                sender_id=sender_id,
                receiver_id=receiver_id,
                status=FRIEND_REQUEST_PENDING,
            )
        )

    create_notification(
        session,
        dispatcher,
        recipient_id=receiver_id,
        sender_id=sender_id,
        kind=NotificationKind.FRIEND_REQUEST,
        related_id=friend_request.id,
        message=f"{sender.name} sent you a friend request.",
    )
    return friend_request


def _load_pending_request_for_receiver(
    repository: FriendRequestRepository, request_id: str, receiver_id: str, action: str
) -> FriendRequest:
    friend_request = repository.get(request_id)
    if friend_request is None:
        raise NotFoundError("Friend request not found")
    if friend_request.receiver_id != receiver_id:
        raise PermissionDeniedError(f"You are not authorized to {action} this request")
    if not friend_request.is_pending():
        raise ValueError("Friend request is not pending")
    return friend_request


def accept_friend_request(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    request_id: str,
    receiver: User,
) -> FriendRequest:
    repository = FriendRequestRepository(session)
    friend_request = _load_pending_request_for_receiver(
        repository, request_id, receiver.id, "accept"
    )

    friend_request.status = FRIEND_REQUEST_ACCEPTED
    friend_request = repository.update(friend_request)
    if repository.get_friendship(friend_request.sender_id, receiver.id) is None:
        repository.create_friendship(friend_request.sender_id, receiver.id)

    create_notification(
        session,
        dispatcher,
        recipient_id=friend_request.sender_id,
        sender_id=receiver.id,
        kind=NotificationKind.FRIEND_REQUEST_ACCEPTED,
        related_id=receiver.id,
        message=f"{receiver.name} accepted your friend request.",
    )
    return friend_request


def reject_friend_request(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    request_id: str,
    receiver: User,
) -> FriendRequest:
    repository = FriendRequestRepository(session)
    friend_request = _load_pending_request_for_receiver(
        repository, request_id, receiver.id, "reject"
    )

    friend_request.status = FRIEND_REQUEST_REJECTED
    friend_request = repository.update(friend_request)

    create_notification(
        session,
        dispatcher,
        recipient_id=friend_request.sender_id,
        sender_id=receiver.id,
        kind=NotificationKind.FRIEND_REQUEST_REJECTED,
        related_id=receiver.id,
        message=f"{receiver.name} rejected your friend request.",
    )
    return friend_request


def list_pending_friend_requests(
    session: Session, *, user_id: str
) -> tuple[Sequence[FriendRequest], Sequence[FriendRequest]]:
    """Return the pending requests ``(received, sent)`` by ``user_id``."""

    repository = FriendRequestRepository(session)
    return (
        repository.list_pending(receiver_id=user_id),
        repository.list_pending(sender_id=user_id),
    )


def list_friends(session: Session, *, user_id: str) -> list[User]:
    friendships = FriendRequestRepository(session).list_friendships(user_id)
    friend_ids = [friendship.other_user_id(user_id) for friendship in friendships]
    users = UserRepository(session).get_map_by_ids(friend_ids)
    return [users[friend_id] for friend_id in friend_ids if friend_id in users]


__all__ = [
    "accept_friend_request",
    "list_friends",
    "list_pending_friend_requests",
    "reject_friend_request",
    "send_friend_request",
]
