"""Utility helpers for reusable functionality."""

from .datetime import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    resolve_timezone,
    start_of_day,
)
from .money import format_amount

__all__ = [
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "format_amount",
    "get_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "resolve_timezone",
    "start_of_day",
]
