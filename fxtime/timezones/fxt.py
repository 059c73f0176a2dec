"""
Forex Trading Time (FXT).

FXT is the America/New_York wall clock moved forward by a constant
seven hours: the trading day ends at 17:00 New York time, which is
midnight FXT all year round.  FXT inherits the New York DST calendar
but needs no transition table of its own.

An FXT timestamp counts seconds since 1970-01-01 00:00 FXT.  Because
FXT wall time has no gaps, an FXT timestamp read as GMT gives the FXT
calendar date and time directly.

No function here touches process-wide timezone settings; every zone is
passed explicitly.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from ..utils.timeutils import DATE_FORMAT, HOURS, format_gmt, parse_datetime, to_timestamp
from .resolver import FXT, GMT, OffsetQuery, ZoneOffsetResolver, is_offset_zero, normalize_zone
from .transitions import NY_ZONE

logger = logging.getLogger(__name__)

FXT_SHIFT = 7 * HOURS


class FxtClock:
    """Convert timestamps between civil zones and FXT.

    Parameters
    ----------
    resolver : ZoneOffsetResolver, optional
        Offset source.  A resolver backed by the shared transition
        tables is created when omitted.
    """

    def __init__(self, resolver: Optional[ZoneOffsetResolver] = None) -> None:
        self.resolver = resolver or ZoneOffsetResolver()

    def to_fxt(self, timestamp: Optional[int] = None, zone: Optional[str] = GMT) -> int:
        """Return the FXT based timestamp of `timestamp`.

        Parameters
        ----------
        timestamp : int, optional
            Seconds since the epoch in `zone`.  Defaults to the current
            time, in which case `zone` is ignored and GMT is used.
        zone : str
            Base of `timestamp`: GMT, UTC, FXT or an IANA zone name.

        Returns
        -------
        int
            Seconds since 1970-01-01 00:00 FXT.
        """
        if timestamp is None:
            timestamp, zone = int(time.time()), GMT
        zone = normalize_zone(zone)

        if zone == FXT:
            return timestamp

        if is_offset_zero(zone):
            gmt_time = timestamp
        else:
            offset = self.resolver.offset_at(timestamp, zone)
            gmt_time = timestamp + offset
            # the offset is sampled at the input instant only
            check = self.resolver.offset_at(gmt_time, zone)
            if check != offset:
                logger.debug(
                    "DST transition of %s between %d and %d (offsets %d/%d), result is off by %d seconds",
                    zone, timestamp, gmt_time, offset, check, check - offset,
                )

        ny_offset = self.resolver.offset_at(gmt_time, NY_ZONE)
        return gmt_time + ny_offset + FXT_SHIFT

    def from_fxt(self, fxt_time: int) -> int:
        """Return the GMT timestamp of an FXT based timestamp.

        The New York offset is sampled twice, first at the estimate
        without DST correction and then at the corrected estimate.  The
        result is exact except for FXT times within the hours around a
        New York DST transition.
        """
        base = fxt_time - FXT_SHIFT
        estimate = base - self.resolver.offset_at(base, NY_ZONE)
        return base - self.resolver.offset_at(estimate, NY_ZONE)

    def fxt_offset_from_gmt(self, gmt_time: Optional[int] = None) -> OffsetQuery:
        """Return the FXT offset to GMT at `gmt_time` and its transitions.

        FXT lies east of GMT, so known offsets are always positive and
        ``GMT + offset = FXT``.  Offsets outside the known history are
        ``None``.
        """
        if gmt_time is None:
            gmt_time = int(time.time())
        return self.resolver.query(gmt_time, NY_ZONE).shifted(FXT_SHIFT)

    def fxt_to_timestamp(self, text: str) -> int:
        """Parse FXT date/time text into a GMT timestamp.

        The text is read as New York wall time and moved back by the
        FXT shift.  Text carrying its own zone or offset is honoured.

        Raises
        ------
        InvalidArgumentError
            If the text is not a recognisable date/time.
        """
        ts = parse_datetime(text)
        if ts.tzinfo is None:
            ts = ts.tz_localize(NY_ZONE, ambiguous=True, nonexistent="shift_forward")
        return to_timestamp(ts) - FXT_SHIFT

    def fxt_date(self, gmt_time: Optional[int] = None, fmt: str = DATE_FORMAT) -> str:
        """Format a GMT timestamp as FXT wall-clock text."""
        return format_gmt(self.to_fxt(gmt_time, GMT), fmt)
