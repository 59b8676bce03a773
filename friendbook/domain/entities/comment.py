"""Domain entity representing a comment on a post."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Comment:
    id: str | None
    post_id: str
    user_id: str
    content: str
    liked_by: list[str] = field(default_factory=list)
    created_at: datetime | None = None
