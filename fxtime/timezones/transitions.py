"""
DST transition tables.

A transition table is the ordered history of UTC offset changes of a
civil timezone, read once from the IANA database shipped with `pytz`.
Tables are immutable and cached per zone for the lifetime of the
process; `get_transition_table()` is safe to call from several threads
at once.
"""

from __future__ import annotations

import bisect
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Sequence, Tuple
import pytz

from ..errors import ConfigurationError, InvalidArgumentError
from ..utils.timeutils import to_timestamp

logger = logging.getLogger(__name__)

NY_ZONE = "America/New_York"


@dataclass(frozen=True)
class TransitionRecord:
    """The UTC offset that becomes effective at and after `instant`."""
    instant: int
    offset: int


class TransitionTable:
    """Ascending, immutable sequence of `TransitionRecord` for one zone.

    Parameters
    ----------
    zone : str
        Name of the zone the records describe.
    records : iterable of TransitionRecord
        Transitions in ascending order of `instant`.
    """

    def __init__(self, zone: str, records: Iterable[TransitionRecord] = ()) -> None:
        self.zone = zone
        self._records: Tuple[TransitionRecord, ...] = tuple(records)
        self._instants: Tuple[int, ...] = tuple(r.instant for r in self._records)
        if any(a >= b for a, b in zip(self._instants, self._instants[1:])):
            raise ConfigurationError(f"Transitions of {zone} are not strictly ascending")

    @classmethod
    def load(cls, zone: str) -> "TransitionTable":
        """Build the table of `zone` from the IANA database.

        The first record is the oldest transition in the installed tz
        data.  Its date depends on how that data was compiled: a full
        history starts with the switch from local mean time (1883 for
        New York), a 32-bit build starts at the 1901-12-13 20:45:52 UTC
        lower bound with the offset then in effect.

        Raises
        ------
        InvalidArgumentError
            If the zone name is unknown.
        ConfigurationError
            If the zone has no transition history.
        """
        try:
            tz = pytz.timezone(zone)
        except pytz.UnknownTimeZoneError as exc:
            raise InvalidArgumentError(f"Unknown timezone: {zone}") from exc

        utc_times: Optional[Sequence[datetime]] = getattr(tz, "_utc_transition_times", None)
        infos = getattr(tz, "_transition_info", None)
        if not utc_times or not infos:
            raise ConfigurationError(f"Timezone {zone} has no transition history")

        records = []
        for utc_time, (utcoffset, _dst, _name) in zip(utc_times, infos):
            # datetime.min stands for everything before the oldest record
            if utc_time == datetime.min:
                continue
            records.append(TransitionRecord(to_timestamp(utc_time), int(utcoffset.total_seconds())))

        table = cls(tz.zone, records)
        logger.debug("Loaded %d transitions for %s", len(table), table.zone)
        return table

    @property
    def records(self) -> Tuple[TransitionRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def __getitem__(self, index: int) -> TransitionRecord:
        return self._records[index]

    def index_at(self, instant: int) -> int:
        """Return the index of the last record with `record.instant <= instant`.

        Returns ``-1`` if the table is empty or `instant` precedes all
        records.
        """
        return bisect.bisect_right(self._instants, instant) - 1

    def __repr__(self) -> str:
        return f"TransitionTable({self.zone!r}, {len(self)} records)"


_cache: Dict[str, TransitionTable] = {}
_cache_lock = threading.Lock()


def get_transition_table(zone: str = NY_ZONE) -> TransitionTable:
    """Return the shared table of `zone`, loading it on first use."""
    table = _cache.get(zone)
    if table is not None:
        return table
    with _cache_lock:
        table = _cache.get(zone)
        if table is None:
            table = TransitionTable.load(zone)
            _cache[zone] = table
    return table
