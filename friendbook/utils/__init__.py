"""Utility helpers for reusable functionality."""

from .datetime import (
    from_storage_datetime,
    get_app_timezone,
    storage_now,
    to_storage_datetime,
    utc_now,
)

__all__ = [
    "from_storage_datetime",
    "get_app_timezone",
    "storage_now",
    "to_storage_datetime",
    "utc_now",
]
