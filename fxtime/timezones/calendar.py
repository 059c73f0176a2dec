"""
Forex trading calendar.

Trading days are evaluated in FXT: a day is a trading day unless it is
a Saturday, a Sunday, New Year's Day or Christmas Day.  There are no
movable or regional holidays.
"""

from __future__ import annotations

from typing import Optional

from ..utils.timeutils import gmt_datetime
from .fxt import FxtClock
from .resolver import GMT

SATURDAY = 5
SUNDAY = 6

HOLIDAYS = frozenset({(1, 1), (12, 25)})  # (month, day)


class TradingCalendar:
    """Trading day predicates built on an `FxtClock`."""

    def __init__(self, clock: Optional[FxtClock] = None) -> None:
        self.clock = clock or FxtClock()

    def is_weekend(self, timestamp: int, zone: Optional[str] = GMT) -> bool:
        """Whether the FXT day of `timestamp` is a Saturday or Sunday."""
        fxt_time = self.clock.to_fxt(timestamp, zone)
        return gmt_datetime(fxt_time).weekday() in (SATURDAY, SUNDAY)

    def is_holiday(self, timestamp: int, zone: Optional[str] = GMT) -> bool:
        """Whether the FXT day of `timestamp` is January 1 or December 25."""
        fxt_time = self.clock.to_fxt(timestamp, zone)
        day = gmt_datetime(fxt_time)
        return (day.month, day.day) in HOLIDAYS

    def is_source_date_holiday(self, timestamp: int, zone: Optional[str] = GMT) -> bool:
        """Whether `timestamp` read as GMT falls on January 1 or December 25.

        The date is taken from the unconverted timestamp.  Around
        midnight this differs from `is_holiday()`, which uses the FXT
        date.  The conversion still runs so an unknown offset raises the
        same way in both variants.
        """
        self.clock.to_fxt(timestamp, zone)
        day = gmt_datetime(timestamp)
        return (day.month, day.day) in HOLIDAYS

    def is_trading_day(self, timestamp: int, zone: Optional[str] = GMT) -> bool:
        """Whether `timestamp` falls on an FXT trading day."""
        return not self.is_weekend(timestamp, zone) and not self.is_holiday(timestamp, zone)
