"""
Timestamp and calendar utilities.

This module centralises the conversions between integer Unix
timestamps and calendar values.  All zone semantics live in
`fxtime.timezones`; the helpers here only ever interpret a timestamp
as GMT, which is also how FXT-based timestamps are rendered (FXT has no
DST gaps of its own, so its wall clock is the GMT reading of the FXT
timestamp).
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from typing import Union
import pandas as pd

from ..errors import InvalidArgumentError

MINUTES = 60
HOURS = 60 * MINUTES
DAYS = 24 * HOURS

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DIAGNOSTIC_FORMAT = "%a, %d-%b-%Y %H:%M:%S"


def to_timestamp(dt: Union[datetime, pd.Timestamp]) -> int:
    """Convert a datetime to seconds since the epoch.

    Naive datetimes are taken as GMT.  Aware ones are converted first.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return calendar.timegm(dt.timetuple())


def gmt_datetime(instant: int) -> datetime:
    """Return the naive calendar datetime of `instant` read as GMT."""
    return datetime.fromtimestamp(instant, tz=timezone.utc).replace(tzinfo=None)


def format_gmt(instant: int, fmt: str = DATE_FORMAT) -> str:
    """Format `instant` as GMT using a `strftime` pattern."""
    return gmt_datetime(instant).strftime(fmt)


def parse_datetime(text: str) -> pd.Timestamp:
    """Parse free-form date/time text into a `pandas.Timestamp`.

    Raises
    ------
    InvalidArgumentError
        If the text is not a recognisable date/time.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidArgumentError(f'Invalid date/time: "{text}"')
    try:
        ts = pd.Timestamp(text.strip())
    except (ValueError, TypeError) as exc:
        raise InvalidArgumentError(f'Invalid date/time: "{text}"') from exc
    if pd.isna(ts):
        raise InvalidArgumentError(f'Invalid date/time: "{text}"')
    return ts


def pretty_time_range(start: str, end: str) -> str:
    """Return a compact description of the range between two dates.

    The shared leading parts are written once::

        15.01.2024 10:00-12:30      same day
        15.-17.01.2024              same month
        30.01.-02.02.2024           same year
        30.12.2023-02.01.2024       different years
    """
    start_ts = parse_datetime(start)
    end_ts = parse_datetime(end)

    if start_ts.year == end_ts.year:
        if start_ts.month == end_ts.month:
            if start_ts.day == end_ts.day:
                return start_ts.strftime("%d.%m.%Y %H:%M") + "-" + end_ts.strftime("%H:%M")
            return start_ts.strftime("%d.") + "-" + end_ts.strftime("%d.%m.%Y")
        return start_ts.strftime("%d.%m.") + "-" + end_ts.strftime("%d.%m.%Y")
    return start_ts.strftime("%d.%m.%Y") + "-" + end_ts.strftime("%d.%m.%Y")
