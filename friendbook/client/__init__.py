"""Reference client that keeps a local notification list in sync."""

from .inbox import NotificationInbox
from .realtime import HandshakeRejectedError, NotificationClient, ReconnectExhaustedError

__all__ = [
    "HandshakeRejectedError",
    "NotificationClient",
    "NotificationInbox",
    "ReconnectExhaustedError",
]
