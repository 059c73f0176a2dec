import os
import sys
import struct

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fxtime.data.models import Tick, TickLayout
from fxtime.data.tick_data import decode_ticks, tick_size
from fxtime.errors import MalformedLengthError

import unittest


class TestTickLayouts(unittest.TestCase):
    def test_record_sizes(self) -> None:
        self.assertEqual(tick_size(TickLayout.MYFX), 12)
        self.assertEqual(tick_size(TickLayout.DUKASCOPY), 20)

    def test_myfx_little_endian(self) -> None:
        data = struct.pack("<3I", 1000, 110000, 110005) + struct.pack("<3I", 1250, 110001, 110004)
        ticks = decode_ticks(data, TickLayout.MYFX)
        self.assertEqual(ticks, [Tick(1000, 110000, 110005), Tick(1250, 110001, 110004)])
        self.assertIsNone(ticks[0].ask_volume)

    def test_dukascopy_big_endian_ask_first(self) -> None:
        data = struct.pack(">3I2f", 1000, 110005, 110000, 1.5, 2.25)
        ticks = decode_ticks(data, TickLayout.DUKASCOPY)
        self.assertEqual(ticks, [Tick(1000, bid=110000, ask=110005, ask_volume=1.5, bid_volume=2.25)])

    def test_same_buffer_differs_by_layout(self) -> None:
        data = b"\x00" * 60
        self.assertEqual(len(decode_ticks(data, TickLayout.MYFX)), 5)
        self.assertEqual(len(decode_ticks(data, TickLayout.DUKASCOPY)), 3)

    def test_empty_buffer(self) -> None:
        for layout in TickLayout:
            self.assertEqual(decode_ticks(b"", layout), [])

    def test_malformed_length(self) -> None:
        with self.assertRaises(MalformedLengthError) as ctx:
            decode_ticks(b"\x00" * 20, TickLayout.MYFX)
        self.assertEqual(ctx.exception.record_size, 12)
        with self.assertRaises(MalformedLengthError) as ctx:
            decode_ticks(b"\x00" * 24, TickLayout.DUKASCOPY)
        self.assertEqual(ctx.exception.length, 24)
        self.assertIn("not a multiple of 20", str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
