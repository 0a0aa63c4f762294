"""Date/time helpers shared by the scheduling core.

Dates travel as `YYYY-MM-DD`, times of day as 24-hour `HH:mm`.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Tuple

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

MINUTES_PER_DAY = 24 * 60


def parse_date(value) -> Optional[date]:
    """Return a date for a `YYYY-MM-DD` string (or a date), None if malformed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_valid_date(value) -> bool:
    return parse_date(value) is not None


def parse_hhmm(value) -> Optional[time]:
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not _TIME_RE.match(value):
        return None
    hh, mm = value.split(":")
    return time(int(hh), int(mm))


def is_valid_time(value) -> bool:
    return parse_hhmm(value) is not None


def to_minutes(t) -> int:
    """Convert time to minutes since midnight."""
    if hasattr(t, "hour"):
        return int(t.hour) * 60 + int(t.minute)
    s = str(t)
    hh, mm = s[:5].split(":")
    return int(hh) * 60 + int(mm)


def window_minutes(start, end) -> Tuple[int, int]:
    """Minutes-since-midnight interval; an end at or before start wraps past midnight."""
    s = to_minutes(start)
    e = to_minutes(end)
    if e <= s:
        e += MINUTES_PER_DAY
    return s, e


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Check if two half-open ranges overlap."""
    return a_start < b_end and b_start < a_end


def daterange(start: date, end: date) -> Iterator[date]:
    cur = start
    while cur <= end:
        yield cur
        cur += timedelta(days=1)


def interval_on(day: date, start: time, end: time) -> Tuple[datetime, datetime]:
    """Concrete datetimes for a time-of-day window anchored on `day`."""
    start_dt = datetime.combine(day, start)
    end_dt = datetime.combine(day, end)
    if end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return start_dt, end_dt


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0


def day_of_week(day: date) -> int:
    """0=Sun ... 6=Sat, the numbering stored on staffing requirements."""
    return (day.weekday() + 1) % 7


def week_start(day: date, week_starts_on: int) -> date:
    """First day of the week containing `day` (weekday numbering, Monday=0)."""
    offset = (day.weekday() - week_starts_on) % 7
    return day - timedelta(days=offset)


def add_months(day: date, months: int) -> date:
    """Same day-of-month `months` later, clamped to the month's last day."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
