"""Realtime notification helpers for the infrastructure layer."""

from .dispatcher import EventDispatcher, NotificationDispatcher
from .envelope import (
    EnvelopeType,
    NotificationPayload,
    PongEnvelope,
    PushEnvelope,
    ReadyEnvelope,
    ReadyPayload,
    SenderSummary,
    build_notification_payload,
    dump_envelope,
    parse_server_envelope,
    serialize_notification,
)
from .registry import Connection, ConnectionRegistry, ConnectionState

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "ConnectionState",
    "EventDispatcher",
    "NotificationDispatcher",
    "EnvelopeType",
    "NotificationPayload",
    "PongEnvelope",
    "PushEnvelope",
    "ReadyEnvelope",
    "ReadyPayload",
    "SenderSummary",
    "build_notification_payload",
    "dump_envelope",
    "parse_server_envelope",
    "serialize_notification",
]
