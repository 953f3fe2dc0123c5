#!/usr/bin/env python3
"""
Ledger Date Handling

Normalizes the assorted date notations found in payment notification emails
to the ledger's canonical YYYY/MM/DD form, and provides the clock abstraction
used wherever "now" matters.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Tokyo"

# Year, month and day separated by 年/月, slashes, dashes or dots.
# Anything after the day (日, weekday, time of day) is ignored.
_DATE_PATTERN = re.compile(r"(\d{4})\s*[年/\-.]\s*(\d{1,2})\s*[月/\-.]\s*(\d{1,2})")

Clock = Callable[[], datetime]


def normalize_date(value: str) -> str:
    """
    Normalize a date string from an email body to YYYY/MM/DD.

    Args:
        value: Text such as "2025年05月01日 12:00", "2025/5/1(木) 09:30"
            or "2025-05-01 12:34:56"

    Returns:
        Canonical date string, e.g. "2025/05/01"

    Raises:
        ValueError: If no calendar date can be found or it does not exist
    """
    match = _DATE_PATTERN.search(value)
    if not match:
        raise ValueError(f"Unrecognized date: {value!r}")

    year, month, day = (int(part) for part in match.groups())
    return to_ledger_date(date(year, month, day))


def to_ledger_date(value: date | datetime, tz: tzinfo | None = None) -> str:
    """
    Format a date (or timestamp) as YYYY/MM/DD.

    Aware timestamps are first converted to ``tz`` so that an email received
    just after midnight local time lands on the local calendar day.
    """
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        value = value.date()
    return value.strftime("%Y/%m/%d")


def get_timezone(name: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    """Look up a timezone by IANA name."""
    return ZoneInfo(name)


def system_clock() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def fixed_clock(moment: datetime) -> Clock:
    """Clock that always reports ``moment``."""

    def clock() -> datetime:
        return moment

    return clock
