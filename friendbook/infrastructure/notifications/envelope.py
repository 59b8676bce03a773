"""Wire format of the messages exchanged over notification websockets."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from friendbook.domain.entities import Notification, NotificationKind

logger = logging.getLogger(__name__)


class EnvelopeType(str, Enum):
    """Every ``type`` tag the server may put on an outgoing message."""

    NEW_NOTIFICATION = "new_notification"
    READY = "ready"
    PONG = "pong"


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SenderSummary(_WireModel):
    id: str
    name: str
    profile_image_url: str | None = Field(default=None, alias="profileImageUrl")


class NotificationPayload(_WireModel):
    """Projection of a notification record that a client can render directly."""

    id: str
    recipient_id: str = Field(alias="recipientId")
    sender: SenderSummary
    type: NotificationKind
    related_id: str = Field(alias="relatedId")
    is_read: bool = Field(alias="isRead")
    created_at: datetime = Field(alias="createdAt")
    message: str | None = None


class PushEnvelope(_WireModel):
    type: Literal["new_notification"] = "new_notification"
    payload: NotificationPayload


class ReadyPayload(_WireModel):
    user_id: str = Field(alias="userId")


class ReadyEnvelope(_WireModel):
    type: Literal["ready"] = "ready"
    payload: ReadyPayload


class PongEnvelope(_WireModel):
    type: Literal["pong"] = "pong"


ServerEnvelope = Annotated[
    Union[PushEnvelope, ReadyEnvelope, PongEnvelope], Field(discriminator="type")
]

_server_envelope_adapter: TypeAdapter[ServerEnvelope] = TypeAdapter(ServerEnvelope)
_KNOWN_TYPES = frozenset(member.value for member in EnvelopeType)


def build_notification_payload(notification: Notification) -> NotificationPayload:
    """Return the wire projection of a persisted ``notification``."""

    if notification.id is None or notification.created_at is None:
        raise ValueError("Only persisted notifications can be serialized")
    sender = notification.sender
    return NotificationPayload(
        id=notification.id,
        recipient_id=notification.recipient_id,
        sender=SenderSummary(
            id=sender.id if sender else notification.sender_id,
            name=sender.name if sender else "",
            profile_image_url=sender.profile_image_url if sender else None,
        ),
        type=notification.kind,
        related_id=notification.related_id,
        is_read=notification.is_read,
        created_at=notification.created_at,
        message=notification.message or None,
    )


def dump_envelope(envelope: BaseModel) -> dict[str, Any]:
    """Return a JSON-ready dict; absent optional fields are omitted rather than ``null``."""

    return envelope.model_dump(mode="json", by_alias=True, exclude_none=True)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the ``new_notification`` envelope for ``notification``."""

    return dump_envelope(PushEnvelope(payload=build_notification_payload(notification)))


def parse_server_envelope(raw: str | bytes | dict[str, Any]) -> ServerEnvelope | None:
    """Decode a server message, returning ``None`` for unknown or malformed input."""

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Discarding websocket frame that is not valid JSON")
            return None
    if not isinstance(raw, dict):
        return None
    if raw.get("type") not in _KNOWN_TYPES:
        logger.debug("Ignoring envelope with unrecognized type %r", raw.get("type"))
        return None
    try:
        return _server_envelope_adapter.validate_python(raw)
    except ValidationError:
        logger.warning("Discarding malformed %s envelope", raw.get("type"))
        return None


__all__ = [
    "EnvelopeType",
    "NotificationPayload",
    "PongEnvelope",
    "PushEnvelope",
    "ReadyEnvelope",
    "ReadyPayload",
    "SenderSummary",
    "ServerEnvelope",
    "build_notification_payload",
    "dump_envelope",
    "parse_server_envelope",
    "serialize_notification",
]
