"""
Tick data reader.

Two binary tick layouts are in circulation and they disagree on the
record size:

    MYFX        12 bytes, little-endian
                uint time_delta_ms, uint bid, uint ask
    DUKASCOPY   20 bytes, big-endian
                uint time_delta_ms, uint ask, uint bid,
                float ask_volume, float bid_volume

`time_delta_ms` counts milliseconds since the start of the hour the
file covers.  Prices are integer points.  The caller chooses the layout
explicitly; it is not guessed from the data.
"""

from __future__ import annotations

import struct
from typing import Dict, List

from ..errors import MalformedLengthError
from .models import Tick, TickLayout

TICK_STRUCTS: Dict[TickLayout, struct.Struct] = {
    TickLayout.MYFX: struct.Struct("<3I"),
    TickLayout.DUKASCOPY: struct.Struct(">3I2f"),
}


def tick_size(layout: TickLayout) -> int:
    return TICK_STRUCTS[layout].size


def decode_ticks(data: bytes, layout: TickLayout) -> List[Tick]:
    """Decode a buffer of tick records in the given layout.

    Raises
    ------
    MalformedLengthError
        If the length of `data` is not a multiple of the record size.
    """
    record = TICK_STRUCTS[layout]
    if len(data) % record.size:
        raise MalformedLengthError(len(data), record.size)

    if layout is TickLayout.MYFX:
        return [Tick(delta, bid, ask) for delta, bid, ask in record.iter_unpack(data)]
    return [
        Tick(delta, bid, ask, ask_volume, bid_volume)
        for delta, ask, bid, ask_volume, bid_volume in record.iter_unpack(data)
    ]
