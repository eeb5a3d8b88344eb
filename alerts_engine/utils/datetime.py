"""Timezone helpers shared by due-date math, quiet hours and persistence."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from alerts_engine.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"
# Accepts "UTC+6", "GMT-03:30" and bare offsets such as "+05:45".
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)?(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


def get_app_timezone() -> tzinfo:
    """Return the timezone named by the ``APP_TIMEZONE`` setting."""

    return resolve_timezone(get_settings().app_timezone)


@lru_cache(maxsize=16)
def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA name or a UTC offset; unknown values resolve to UTC."""

    name = (name or "").strip() or _DEFAULT_TIMEZONE
    match = _OFFSET_PATTERN.match(name)
    if match:
        offset = timedelta(
            hours=int(match.group("hours")), minutes=int(match.group("minutes") or 0)
        )
        return timezone(-offset if match.group("sign") == "-" else offset)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Return the current time in the storage representation."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Read a stored (naive) or foreign datetime back as app-local aware time."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` as app-local wall time without ``tzinfo``.

    DATETIME columns hold naive values; repositories convert on the way in
    with this helper and on the way out with :func:`ensure_app_timezone`.
    """

    localized = ensure_app_timezone(value)
    return localized.replace(tzinfo=None) if localized is not None else None


def start_of_day(value: date, tz: tzinfo | None = None) -> datetime:
    """Return midnight of ``value`` as an aware datetime in ``tz``."""

    return datetime.combine(value, time.min, tzinfo=tz or get_app_timezone())
