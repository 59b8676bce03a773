"""Pydantic models describing the durable notification list."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from friendbook.infrastructure.notifications import NotificationPayload


class NotificationListResponse(BaseModel):
    """One page of notifications using the same projection as realtime pushes."""

    model_config = ConfigDict(populate_by_name=True)

    notifications: list[NotificationPayload]
    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_notifications: int = Field(alias="totalNotifications")


class NotificationActionResponse(BaseModel):
    message: str
    updated: int = 0


__all__ = ["NotificationActionResponse", "NotificationListResponse"]
