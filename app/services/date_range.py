"""
Date-range resolution for question listings and trend queries.
Turns YYYY-MM-DD calendar dates into half-open UTC windows [start, end).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

DATE_ONLY_PATTERN = r"^\d{4}-[01]\d-[0-3]\d$"
_DATE_ONLY_RE = re.compile(DATE_ONLY_PATTERN)


class DateRangeError(ValueError):
    """Raised for malformed dates or invalid date parameter combinations."""


@dataclass(frozen=True)
class DateWindow:
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


def parse_date(value: str) -> date:
    if not _DATE_ONLY_RE.match(value or ""):
        raise DateRangeError(f"Expected date in YYYY-MM-DD format, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise DateRangeError(f"Invalid calendar date: {value}")


def utc_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def window_for_day(day: date) -> DateWindow:
    start = utc_midnight(day)
    return DateWindow(start=start, end=start + timedelta(days=1))


def window_for_range(start: date, end: date) -> DateWindow:
    # Both ends are inclusive calendar dates.
    if start > end:
        raise DateRangeError("`start` must be on or before `end`")
    return DateWindow(start=utc_midnight(start), end=utc_midnight(end) + timedelta(days=1))


def today_window(now: Optional[datetime] = None) -> DateWindow:
    now = now or datetime.now(timezone.utc)
    return window_for_day(now.astimezone(timezone.utc).date())


def resolve_trend_window(start: Optional[str], end: Optional[str]) -> Optional[DateWindow]:
    """Optional start/end pair; None means all-time."""
    if not start and not end:
        return None
    if not (start and end):
        raise DateRangeError("Provide both `start` and `end` or neither (YYYY-MM-DD)")
    return window_for_range(parse_date(start), parse_date(end))


def resolve_listing_window(
    date_value: Optional[str],
    start: Optional[str],
    end: Optional[str],
) -> DateWindow:
    """Exactly one of a single `date` or a full `start`/`end` range."""
    if date_value and not start and not end:
        return window_for_day(parse_date(date_value))
    if not date_value and start and end:
        return window_for_range(parse_date(start), parse_date(end))
    raise DateRangeError("Provide either `date`, or both `start` and `end` (YYYY-MM-DD)")


def apply_window(query, column, window: Optional[DateWindow]):
    if window is None:
        return query
    return query.filter(column >= window.start, column < window.end)
