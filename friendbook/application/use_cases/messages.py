"""Direct messages between users."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from friendbook.application.errors import NotFoundError
from friendbook.application.use_cases.notifications import create_notification
from friendbook.domain.entities import Message, NotificationKind, User
from friendbook.infrastructure.notifications import NotificationDispatcher
from friendbook.infrastructure.repositories import MessageRepository, UserRepository


def send_message(
    session: Session,
    dispatcher: NotificationDispatcher,
    *,
    sender: User,
    receiver_id: str,
    content: str,
) -> Message:
    if not content or not content.strip():
        raise ValueError("Message content is required")
    if sender.id == receiver_id:
        raise ValueError("Cannot send a message to yourself")
    if UserRepository(session).get(receiver_id) is None:
        raise NotFoundError("Receiver not found")

    message = MessageRepository(session).create(
        Message(id=None, sender_id=sender.id, receiver_id=receiver_id, content=content.strip())
    )
    create_notification(
        session,
        dispatcher,
        recipient_id=receiver_id,
        sender_id=sender.id,
        kind=NotificationKind.NEW_MESSAGE,
        related_id=message.id,
        message=f"{sender.name} sent you a message.",
    )
    return message


def list_conversation(
    session: Session, *, user_id: str, other_user_id: str
) -> Sequence[Message]:
    return MessageRepository(session).list_conversation(user_id, other_user_id)


__all__ = ["list_conversation", "send_message"]
