"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    text: str = Field(..., min_length=1)
    tagged_user_ids: list[str] = Field(default_factory=list)


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    text: str
    liked_by: list[str]
    tagged_user_ids: list[str]
    total_likes: int
    created_at: datetime | None = None
