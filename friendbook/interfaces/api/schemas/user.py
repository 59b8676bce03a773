"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    profile_image_url: str | None = None
    bio: str | None = None
    created_at: datetime | None = None
