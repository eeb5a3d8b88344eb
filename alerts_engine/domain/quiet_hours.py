"""Quiet hours evaluation for notification delivery."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Final

from alerts_engine.domain.entities import NotificationPreferences

logger = logging.getLogger(__name__)

_TIME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<hours>\d{1,2}):(?P<minutes>\d{2})$")


def parse_minutes(value: str) -> int:
    """Return the minutes since midnight for an ``HH:MM`` string."""

    match = _TIME_PATTERN.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours = int(match.group("hours"))
    minutes = int(match.group("minutes"))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def is_suppressed(preferences: NotificationPreferences, now: datetime) -> bool:
    """Return ``True`` when ``now`` falls inside the user's quiet hours.

    Both window boundaries are inclusive. A window whose start is after its end
    crosses midnight; a window with equal boundaries covers that single minute.
    """

    communication = preferences.communication
    if not communication.quiet_hours_enabled:
        return False

    try:
        start = parse_minutes(communication.quiet_hours_start)
        end = parse_minutes(communication.quiet_hours_end)
    except ValueError as exc:
        logger.warning("Ignoring malformed quiet hours window: %s", exc)
        return False

    current = now.hour * 60 + now.minute
    if start <= end:
        return start <= current <= end
    return current >= start or current <= end


__all__ = ["is_suppressed", "parse_minutes"]
