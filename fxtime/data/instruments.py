"""
Instrument metadata.

A read-only reference table of the instruments with MyFX histories:
quote precision, pip and point sizes and where the history starts.  The
built-in table can be replaced by a YAML file with the same fields,
keyed by symbol.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Union
import pandas as pd
import yaml

from ..errors import InvalidArgumentError
from ..utils.timeutils import parse_datetime, to_timestamp


@dataclass(frozen=True)
class Instrument:
    """Static properties of a tradeable symbol.

    Attributes
    ----------
    name : str
        Symbol, e.g. ``EURUSD``.
    type : str
        ``forex``, ``index`` or ``metal``.
    digits : int
        Decimal places of a quoted price.
    pip, point : float
        Pip size and smallest price increment.  Bar prices are integer
        multiples of `point`.
    history_start_ticks, history_start_m1 : int or None
        GMT timestamps of the first available tick and M1 bar.
    """
    name: str
    type: str
    long_name: str
    digits: int
    pip: float
    point: float
    price_format: str
    history_start_ticks: Optional[int]
    history_start_m1: Optional[int]
    provider: str

    def to_price(self, points: Union[int, pd.Series]) -> Union[float, pd.Series]:
        """Convert integer points to a decimal price."""
        if isinstance(points, pd.Series):
            return (points * self.point).round(self.digits)
        return round(points * self.point, self.digits)


def _gmt(value: Any) -> Optional[int]:
    if value is None:
        return None
    # YAML turns unquoted dates into date/datetime objects
    ts = parse_datetime(value) if isinstance(value, str) else pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return to_timestamp(ts)


def _instrument(name: str, raw: Mapping[str, Any]) -> Instrument:
    history = raw.get('history_start') or {}
    return Instrument(
        name=name,
        type=str(raw['type']),
        long_name=str(raw.get('long_name', name)),
        digits=int(raw['digits']),
        pip=float(raw['pip']),
        point=float(raw['point']),
        price_format=str(raw.get('price_format', '')),
        history_start_ticks=_gmt(history.get('ticks')),
        history_start_m1=_gmt(history.get('M1')),
        provider=str(raw.get('provider', '')),
    )


_FX5 = {'digits': 5, 'pip': 0.0001, 'point': 0.00001, 'price_format': ".4'"}
_FX3 = {'digits': 3, 'pip': 0.01, 'point': 0.001, 'price_format': ".2'"}

_DEFAULT_TABLE: Dict[str, Dict[str, Any]] = {
    'AUDUSD': dict(_FX5, type='forex', long_name='Australian Dollar vs US Dollar', provider='dukascopy',
                   history_start={'ticks': '2003-08-03 21:00:00', 'M1': '2003-08-03 00:00:00'}),
    'EURUSD': dict(_FX5, type='forex', long_name='Euro vs US Dollar', provider='dukascopy',
                   history_start={'ticks': '2003-05-04 21:00:00', 'M1': '2003-05-04 00:00:00'}),
    'GBPUSD': dict(_FX5, type='forex', long_name='Great Britain Pound vs US Dollar', provider='dukascopy',
                   history_start={'ticks': '2003-05-04 21:00:00', 'M1': '2003-05-04 00:00:00'}),
    'NZDUSD': dict(_FX5, type='forex', long_name='New Zealand Dollar vs US Dollar', provider='dukascopy',
                   history_start={'ticks': '2003-08-03 21:00:00', 'M1': '2003-08-03 00:00:00'}),
    'USDCAD': dict(_FX5, type='forex', long_name='US Dollar vs Canadian Dollar', provider='dukascopy',
                   history_start={'ticks': '2003-08-03 21:00:00', 'M1': '2003-08-03 00:00:00'}),
    'USDCHF': dict(_FX5, type='forex', long_name='US Dollar vs Swiss Franc', provider='dukascopy',
                   history_start={'ticks': '2003-05-04 21:00:00', 'M1': '2003-05-04 00:00:00'}),
    'USDJPY': dict(_FX3, type='forex', long_name='US Dollar vs Japanese Yen', provider='dukascopy',
                   history_start={'ticks': '2003-05-04 21:00:00', 'M1': '2003-05-04 00:00:00'}),
    'USDLFX': dict(_FX5, type='index', long_name='USD Index (LiteForex FX6 index)', provider='myfx',
                   history_start={'M1': '2003-08-03 00:00:00'}),
    'EURLFX': dict(_FX5, type='index', long_name='EUR Index (LiteForex FX6 index)', provider='myfx',
                   history_start={'M1': '2003-08-03 00:00:00'}),
    'USDFX7': dict(_FX5, type='index', long_name='USD Index (FX7 index)', provider='myfx',
                   history_start={'M1': '2003-08-03 00:00:00'}),
    'EURX': dict(_FX3, type='index', long_name='EUR Index (ICE)', provider='myfx',
                 history_start={'M1': '2003-08-04 00:00:00'}),
    'USDX': dict(_FX3, type='index', long_name='USD Index (ICE)', provider='myfx',
                 history_start={'M1': '2003-08-04 00:00:00'}),
    'XAUUSD': dict(_FX3, type='metal', long_name='Gold vs US Dollar', provider='dukascopy',
                   history_start={'ticks': '2003-05-05 00:00:00', 'M1': '1999-09-01 00:00:00'}),
}


def _build(table: Mapping[str, Mapping[str, Any]]) -> Dict[str, Instrument]:
    return {name.upper(): _instrument(name.upper(), raw) for name, raw in table.items()}


DEFAULT_INSTRUMENTS: Mapping[str, Instrument] = _build(_DEFAULT_TABLE)


def load_instruments(path: Optional[str] = None) -> Dict[str, Instrument]:
    """Load an instrument table from YAML, or return the built-in table.

    Parameters
    ----------
    path : str, optional
        YAML file mapping symbols to instrument fields.  Timestamps in
        ``history_start`` are GMT date strings.
    """
    if path is None:
        return dict(DEFAULT_INSTRUMENTS)
    with open(path, "r", encoding="utf-8") as fh:
        raw: Dict[str, Any] = yaml.safe_load(fh) or {}
    try:
        return _build(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"Invalid instrument table {path}: {exc}") from exc


def filter_instruments(instruments: Mapping[str, Instrument], **criteria: Any) -> Dict[str, Instrument]:
    """Return the instruments whose fields equal all given criteria.

    Example: ``filter_instruments(table, type='forex', provider='dukascopy')``.

    Raises
    ------
    InvalidArgumentError
        If a criterion names a field instruments do not have.
    """
    known = {f.name for f in fields(Instrument)}
    unknown = set(criteria) - known
    if unknown:
        raise InvalidArgumentError(f"Invalid filter fields: {sorted(unknown)}")
    return {
        name: inst
        for name, inst in instruments.items()
        if all(getattr(inst, key) == value for key, value in criteria.items())
    }
