"""Timestamp helpers.

Timestamps are stored as naive UTC values because SQLite drops offsets from
``DATETIME`` columns. They are returned to callers as aware datetimes in the
configured application timezone.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from friendbook.config import get_settings

_UTC_OFFSET = re.compile(r"^(?:UTC|GMT)?([+-])(\d{1,2}):?(\d{2})?$", re.IGNORECASE)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Resolve ``APP_TIMEZONE`` as an IANA name or a ``UTC+05:30`` style offset."""

    name = get_settings().app_timezone.strip()
    if not name or name.upper() in {"UTC", "Z"}:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass

    match = _UTC_OFFSET.match(name)
    if match is None:
        return timezone.utc
    sign, hours, minutes = match.groups()
    offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
    return timezone(-offset if sign == "-" else offset)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def storage_now() -> datetime:
    """Column default: the current time as naive UTC."""

    return utc_now().replace(tzinfo=None)


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Convert ``value`` to naive UTC; naive input is taken to be app local time."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_app_timezone())
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_datetime(value: datetime | None) -> datetime | None:
    """Attach UTC to a stored value and express it in the app timezone."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_app_timezone())
