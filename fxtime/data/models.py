"""
Bar, tick and code models.

These dataclasses and enums describe the records read from MyFX
history files and the numeric codes used alongside them.  Keeping them
in a separate module lets the decoders, reports and CLI share them
without importing each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

from ..errors import InvalidArgumentError


@dataclass(frozen=True)
class Bar:
    """One price bar.  Prices are integer points, `time` is FXT based."""
    time: int
    open: int
    high: int
    low: int
    close: int
    ticks: int

    def is_valid(self) -> bool:
        """Whether `low <= open, close <= high` and the bar has ticks."""
        return (
            self.low <= self.open <= self.high
            and self.low <= self.close <= self.high
            and self.ticks > 0
        )


@dataclass(frozen=True)
class Tick:
    """One tick.  `time_delta_ms` counts milliseconds since the start of the hour."""
    time_delta_ms: int
    bid: int
    ask: int
    ask_volume: Optional[float] = None
    bid_volume: Optional[float] = None


class Timeframe(IntEnum):
    """Bar period in minutes."""
    M1 = 1
    M5 = 5
    M15 = 15
    M30 = 30
    H1 = 60
    H4 = 240
    D1 = 1440
    W1 = 10080
    MN1 = 43200
    Q1 = 129600

    @classmethod
    def from_minutes(cls, minutes: int) -> "Timeframe":
        try:
            return cls(minutes)
        except ValueError:
            raise InvalidArgumentError(f"Invalid timeframe: {minutes} (not a known period)") from None

    @classmethod
    def from_label(cls, label: str) -> "Timeframe":
        try:
            return cls[label.strip().upper()]
        except KeyError:
            raise InvalidArgumentError(f"Invalid timeframe: {label!r}") from None

    @property
    def label(self) -> str:
        return self.name

    @property
    def constant_name(self) -> str:
        return f"PERIOD_{self.name}"


class OperationType(IntEnum):
    """Trade operation codes as used by MetaTrader histories."""
    BUY = 0
    SELL = 1
    BUYLIMIT = 2
    SELLLIMIT = 3
    BUYSTOP = 4
    SELLSTOP = 5
    BALANCE = 6
    CREDIT = 7
    TRANSFER = 8  # balance update by the client (deposit or withdrawal)
    VENDOR = 9    # balance update by the broker (dividends, swap, manual)

    @classmethod
    def from_code(cls, code: int) -> "OperationType":
        try:
            return cls(code)
        except ValueError:
            raise InvalidArgumentError(f"Invalid operation type: {code}") from None

    @property
    def description(self) -> str:
        return _OPERATION_DESCRIPTIONS[self]


_OPERATION_DESCRIPTIONS = {
    OperationType.BUY: "Buy",
    OperationType.SELL: "Sell",
    OperationType.BUYLIMIT: "Buy Limit",
    OperationType.SELLLIMIT: "Sell Limit",
    OperationType.BUYSTOP: "Stop Buy",
    OperationType.SELLSTOP: "Stop Sell",
    OperationType.BALANCE: "Balance",
    OperationType.CREDIT: "Credit",
    OperationType.TRANSFER: "Transfer",
    OperationType.VENDOR: "Vendor",
}


class TickLayout(Enum):
    """Candidate binary tick layouts.

    The two sources of tick files disagree on the record size, so
    there is no default: the reader must pick the layout matching the
    file at hand.
    """
    MYFX = "myfx"            # 12 bytes, little-endian: time_delta_ms, bid, ask
    DUKASCOPY = "dukascopy"  # 20 bytes, big-endian: time_delta_ms, ask, bid, ask_volume, bid_volume

    @classmethod
    def from_name(cls, name: str) -> "TickLayout":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise InvalidArgumentError(f"Invalid tick layout: {name!r}") from None
