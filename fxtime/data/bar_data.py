"""
MyFX bar data reader.

History files hold a plain sequence of fixed-size little-endian bar
records::

    struct MYFX_BAR {       size  offset
       uint time;             4      0    FXT timestamp
       uint open;             4      4    in points
       uint high;             4      8    in points
       uint low;              4     12    in points
       uint close;            4     16    in points
       uint ticks;            4     20
    };                     = 24 bytes

Decoding is all-or-nothing: the first malformed record aborts the read
and no partial result is returned.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import List, Optional, Sequence, Union
import pandas as pd

from ..errors import InvalidRecordError, MalformedLengthError, UnimplementedFeatureError
from ..utils.timeutils import DIAGNOSTIC_FORMAT, format_gmt
from .instruments import Instrument
from .models import Bar, Timeframe

logger = logging.getLogger(__name__)

BAR_STRUCT = struct.Struct("<6I")
BAR_SIZE = BAR_STRUCT.size

BAR_FILE_SUFFIX = ".myfx"


def decode_bars(data: bytes) -> List[Bar]:
    """Decode and validate a buffer of MyFX bar records.

    Parameters
    ----------
    data : bytes
        Raw bar records.  Any bytes-like object is accepted.

    Returns
    -------
    list of Bar
        The bars in buffer order.

    Raises
    ------
    MalformedLengthError
        If the length of `data` is not a multiple of `BAR_SIZE`.
    InvalidRecordError
        On the first bar violating `low <= open, close <= high` or
        having zero ticks.
    """
    length = len(data)
    if length % BAR_SIZE:
        raise MalformedLengthError(length, BAR_SIZE)

    bars: List[Bar] = []
    for i, fields in enumerate(BAR_STRUCT.iter_unpack(data)):
        bar = Bar(*fields)
        if not bar.is_valid():
            raise InvalidRecordError(
                f"Illegal data for bar[{i}]: O={bar.open} H={bar.high} L={bar.low} "
                f"C={bar.close} V={bar.ticks} T={format_gmt(bar.time, DIAGNOSTIC_FORMAT)}",
                index=i,
                record=bar,
            )
        bars.append(bar)
    return bars


def read_bar_file(path: Union[str, Path]) -> List[Bar]:
    """Read and decode a MyFX bar file.

    I/O errors (missing file, permissions) propagate unchanged.
    """
    data = Path(path).read_bytes()
    bars = decode_bars(data)
    logger.debug("Read %d bars from %s", len(bars), path)
    return bars


def read_compressed_bar_file(path: Union[str, Path]) -> List[Bar]:
    """Read a compressed MyFX bar file (not implemented)."""
    raise UnimplementedFeatureError(f"read_compressed_bar_file({path})")


def bar_file_path(bar_dir: Union[str, Path], symbol: str, timeframe: Timeframe) -> Path:
    """Return the location of a symbol's history file, e.g. ``data/EURUSD/M1.myfx``."""
    return Path(bar_dir) / symbol.upper() / f"{timeframe.label}{BAR_FILE_SUFFIX}"


def bars_to_frame(bars: Sequence[Bar], instrument: Optional[Instrument] = None) -> pd.DataFrame:
    """Convert bars to a DataFrame indexed by FXT time.

    The index holds naive timestamps of the FXT wall clock.  Prices stay
    in integer points unless `instrument` is given, in which case they
    are converted to decimal prices.
    """
    columns = ['open', 'high', 'low', 'close', 'ticks']
    if not bars:
        return pd.DataFrame(columns=columns, index=pd.DatetimeIndex([], name='time'))

    df = pd.DataFrame(
        [(b.time, b.open, b.high, b.low, b.close, b.ticks) for b in bars],
        columns=['time'] + columns,
    )
    df['time'] = pd.to_datetime(df['time'], unit='s')
    df = df.set_index('time')
    if instrument is not None:
        for col in ('open', 'high', 'low', 'close'):
            df[col] = instrument.to_price(df[col])
    return df
