"""Domain entity representing a post."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Post:
    """Content published by ``user_id`` that friends can like and comment on."""

    id: str | None
    user_id: str
    text: str
    liked_by: list[str] = field(default_factory=list)
    tagged_user_ids: list[str] = field(default_factory=list)
    created_at: datetime | None = None

    @property
    def total_likes(self) -> int:
        return len(self.liked_by)
