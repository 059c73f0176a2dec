"""
UTC offset resolution.

`ZoneOffsetResolver` answers "which UTC offset is in effect at this
instant in this zone" from transition tables.  GMT and UTC always
resolve to zero.  Named civil zones resolve through their table; an
instant before recorded history has no offset and raises instead of
defaulting to zero.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Callable, Dict, Mapping, Optional

from ..errors import InvalidArgumentError, OutOfRangeError
from .transitions import NY_ZONE, TransitionTable, get_transition_table

GMT = "GMT"
UTC = "UTC"
FXT = "FXT"

_OFFSET_ZERO_ZONES = (GMT, UTC)


def normalize_zone(zone: Optional[str]) -> str:
    """Return the canonical spelling of a zone identifier.

    ``None`` means GMT.  GMT, UTC and FXT are matched case-insensitively;
    any other name is passed through for the IANA lookup.
    """
    if zone is None:
        return GMT
    if not isinstance(zone, str) or not zone.strip():
        raise InvalidArgumentError(f"Invalid timezone identifier: {zone!r}")
    name = zone.strip()
    if name.upper() in (GMT, UTC, FXT):
        return name.upper()
    return name


def is_offset_zero(zone: str) -> bool:
    return normalize_zone(zone) in _OFFSET_ZERO_ZONES


def _shift(offset: Optional[int], seconds: int) -> Optional[int]:
    return None if offset is None else offset + seconds


@dataclass(frozen=True)
class Transition:
    """A boundary between two offset periods.

    Either offset is ``None`` when history does not reach that far.
    """
    instant: int
    offset_before: Optional[int]
    offset_after: Optional[int]

    def shifted(self, seconds: int) -> "Transition":
        return replace(
            self,
            offset_before=_shift(self.offset_before, seconds),
            offset_after=_shift(self.offset_after, seconds),
        )


@dataclass(frozen=True)
class OffsetQuery:
    """Offset in effect at an instant plus the transitions around it."""
    offset: Optional[int]
    prev_transition: Optional[Transition]
    next_transition: Optional[Transition]

    def shifted(self, seconds: int) -> "OffsetQuery":
        """Return a copy with every known offset moved by `seconds`."""
        return OffsetQuery(
            offset=_shift(self.offset, seconds),
            prev_transition=self.prev_transition.shifted(seconds) if self.prev_transition else None,
            next_transition=self.next_transition.shifted(seconds) if self.next_transition else None,
        )


class ZoneOffsetResolver:
    """Resolve UTC offsets of civil zones.

    Parameters
    ----------
    tables : mapping of str to TransitionTable, optional
        Pre-built tables keyed by zone name.  Zones not found here are
        fetched through `loader`.
    loader : callable, optional
        Returns the table of a zone name.  Defaults to the process-wide
        cache in `fxtime.timezones.transitions`.
    """

    def __init__(
        self,
        tables: Optional[Mapping[str, TransitionTable]] = None,
        loader: Callable[[str], TransitionTable] = get_transition_table,
    ) -> None:
        self._tables: Dict[str, TransitionTable] = dict(tables or {})
        self._loader = loader
        self._lock = threading.Lock()

    def table(self, zone: str) -> TransitionTable:
        """Return the transition table of a named civil zone."""
        name = normalize_zone(zone)
        if name in _OFFSET_ZERO_ZONES or name == FXT:
            raise InvalidArgumentError(f"Timezone {name} has no transition table")
        table = self._tables.get(name)
        if table is None:
            with self._lock:
                table = self._tables.get(name)
                if table is None:
                    table = self._loader(name)
                    self._tables[name] = table
        return table

    def offset_at(self, instant: int, zone: str) -> int:
        """Return the UTC offset in seconds in effect at `instant`.

        Raises
        ------
        OutOfRangeError
            If `instant` precedes the first known transition of `zone`.
        """
        name = normalize_zone(zone)
        if name in _OFFSET_ZERO_ZONES:
            return 0
        table = self.table(name)
        i = table.index_at(instant)
        if i < 0:
            raise OutOfRangeError(
                f"Time {instant} precedes the known transition history of {table.zone}"
            )
        return table[i].offset

    def query(self, instant: int, zone: str = NY_ZONE) -> OffsetQuery:
        """Return the offset at `instant` with its bracketing transitions.

        Unlike `offset_at()` this never raises for instants outside the
        known history; the unknown parts are ``None`` instead.
        """
        table = self.table(zone)
        n = len(table)
        i = table.index_at(instant)

        offset = table[i].offset if i >= 0 else None

        if i < 0:
            prev = None
        elif i == 0:
            prev = Transition(table[0].instant, None, table[0].offset)
        else:
            prev = Transition(table[i].instant, table[i - 1].offset, table[i].offset)

        if i + 1 < n:
            before = table[i].offset if i >= 0 else None
            nxt = Transition(table[i + 1].instant, before, table[i + 1].offset)
        else:
            nxt = None

        return OffsetQuery(offset, prev, nxt)
