"""Helpers for working with timestamps stored by the messaging core.

Timestamps are handled as aware datetimes in the domain layer and persisted as
naive values localized to ``APP_TIMEZONE``, so every column compares against
the same clock regardless of the database backend.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from jobchat.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone, falling back to UTC."""

    tz_name = (get_settings().app_timezone or "").strip() or _DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(tz_name)
        if match is None:
            return timezone.utc
        sign = -1 if match.group("sign") == "-" else 1
        offset = timedelta(
            hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
        )
        return timezone(sign * offset)


def utcnow_local() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def to_storage(value: datetime | None) -> datetime | None:
    """Return ``value`` localized to the app timezone without ``tzinfo``."""

    if value is None:
        return None
    tz = get_app_timezone()
    localized = value.replace(tzinfo=tz) if value.tzinfo is None else value.astimezone(tz)
    return localized.replace(tzinfo=None)


def from_storage(value: datetime | None) -> datetime | None:
    """Attach the app timezone to a naive ``value`` read from the database."""

    if value is None:
        return None
    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def storage_now() -> datetime:
    """Current time in the representation used by database columns."""

    return to_storage(utcnow_local())  # type: ignore[return-value]


__all__ = [
    "from_storage",
    "get_app_timezone",
    "storage_now",
    "to_storage",
    "utcnow_local",
]
