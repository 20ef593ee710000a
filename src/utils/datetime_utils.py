from __future__ import annotations

import calendar
import math
import time as _time
from datetime import date, datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

DateInput = Union[str, _time.struct_time, datetime, date, None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(dt: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_to_utc(value: DateInput) -> Optional[datetime]:
    """
    Parse the date shapes feeds and providers emit into an aware UTC datetime.

    Naive values are taken as UTC. Returns ``None`` for empty or unparsable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, _time.struct_time):
        # feedparser's *_parsed fields are UTC struct_times
        dt = datetime.fromtimestamp(calendar.timegm(value), tz=timezone.utc)
    else:
        try:
            dt = date_parser.parse(str(value))
        except (ValueError, OverflowError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso_or_none(value: DateInput) -> Optional[str]:
    parsed = parse_to_utc(value)
    return isoformat_utc(parsed) if parsed else None


def sort_timestamp(value: Optional[str]) -> float:
    """Epoch seconds for an ISO string; unknown dates map to ``-inf``."""
    parsed = parse_to_utc(value)
    return parsed.timestamp() if parsed else float("-inf")


def to_display_tz(dt_utc: datetime, tz: str = "America/Los_Angeles") -> datetime:
    """Convert a UTC datetime to the given display timezone (zoneinfo key)."""
    if dt_utc.tzinfo is None:
        dt_utc = dt_utc.replace(tzinfo=timezone.utc)
    try:
        return dt_utc.astimezone(ZoneInfo(tz))
    except ZoneInfoNotFoundError:
        return dt_utc


def sweepstakes_week_number(day: date) -> int:
    """Week of the year where weeks start on Sunday and week 1 holds January 1st."""
    jan_first = date(day.year, 1, 1)
    days_since = (day - jan_first).days
    # Python weekday(): Monday=0; shift so Sunday=0.
    jan_first_weekday = (jan_first.weekday() + 1) % 7
    return math.ceil((days_since + jan_first_weekday + 1) / 7)
