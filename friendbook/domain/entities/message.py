"""Domain entity representing a direct message."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Message:
    id: str | None
    sender_id: str
    receiver_id: str
    content: str
    created_at: datetime | None = None
