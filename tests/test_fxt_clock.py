import os
import sys
import calendar
import time
from concurrent.futures import ThreadPoolExecutor

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fxtime.errors import InvalidArgumentError, OutOfRangeError
from fxtime.timezones.fxt import FXT_SHIFT, FxtClock
from fxtime.timezones.resolver import Transition
from fxtime.timezones.transitions import NY_ZONE, get_transition_table

import unittest

HOUR = 3600


def gmt(*args) -> int:
    return calendar.timegm(tuple(args) + (0,) * (6 - len(args)) + (0, 0, 0))


class TestToFxt(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FxtClock()

    def test_fxt_to_fxt_is_identity(self) -> None:
        for t in (0, gmt(2024, 3, 10, 7), gmt(2024, 7, 1, 12), -5, 2 ** 31):
            self.assertEqual(self.clock.to_fxt(t, "FXT"), t)
            self.assertEqual(self.clock.to_fxt(t, "fxt"), t)

    def test_gmt_in_winter_and_summer(self) -> None:
        winter = gmt(2024, 1, 15, 12)
        summer = gmt(2024, 7, 15, 12)
        self.assertEqual(self.clock.to_fxt(winter), winter + 2 * HOUR)
        self.assertEqual(self.clock.to_fxt(summer), summer + 3 * HOUR)

    def test_default_zone_is_gmt(self) -> None:
        t = gmt(2024, 5, 5, 5)
        self.assertEqual(self.clock.to_fxt(t), self.clock.to_fxt(t, "GMT"))
        self.assertEqual(self.clock.to_fxt(t, "UTC"), self.clock.to_fxt(t, "GMT"))

    def test_fxt_midnight_is_new_york_five_pm(self) -> None:
        # 17:00 EST == 22:00 GMT, 17:00 EDT == 21:00 GMT
        self.assertEqual(self.clock.to_fxt(gmt(2024, 1, 15, 22)), gmt(2024, 1, 16))
        self.assertEqual(self.clock.to_fxt(gmt(2024, 7, 15, 21)), gmt(2024, 7, 16))

    def test_named_zone_offset_sampled_at_input_instant(self) -> None:
        t = gmt(2024, 1, 15, 12)
        # source offset is added at the input instant, then the NY offset applies
        self.assertEqual(self.clock.to_fxt(t, NY_ZONE), t - 5 * HOUR - 5 * HOUR + FXT_SHIFT)
        self.assertEqual(self.clock.to_fxt(t, "Europe/Berlin"), t + HOUR - 5 * HOUR + FXT_SHIFT)

    def test_source_transition_between_input_and_gmt_is_not_corrected(self) -> None:
        # New York springs forward at 07:00 GMT, 2h later the input reads EDT
        # while the derived GMT instant is still in EST
        spring = gmt(2024, 3, 10, 7)
        t = spring + 2 * HOUR
        with self.assertLogs('fxtime.timezones.fxt', 'DEBUG') as logs:
            result = self.clock.to_fxt(t, NY_ZONE)
        self.assertEqual(result, t - 4 * HOUR - 5 * HOUR + FXT_SHIFT)
        self.assertIn("DST transition of America/New_York", logs.output[0])
        self.assertIn("off by -3600 seconds", logs.output[0])

        # Berlin springs forward at 01:00 GMT
        t = gmt(2024, 3, 31, 0, 30)
        with self.assertLogs('fxtime.timezones.fxt', 'DEBUG') as logs:
            result = self.clock.to_fxt(t, "Europe/Berlin")
        self.assertEqual(result, t + HOUR - 4 * HOUR + FXT_SHIFT)
        self.assertIn("DST transition of Europe/Berlin", logs.output[0])

    def test_now(self) -> None:
        before = int(time.time())
        fxt_now = self.clock.to_fxt()
        after = int(time.time())
        offset = self.clock.fxt_offset_from_gmt(before).offset
        self.assertLessEqual(before + offset - HOUR, fxt_now)
        self.assertLessEqual(fxt_now, after + offset + HOUR)

    def test_before_history_is_out_of_range(self) -> None:
        first = get_transition_table(NY_ZONE)[0].instant
        with self.assertRaises(OutOfRangeError):
            self.clock.to_fxt(first - 1)

    def test_does_not_touch_process_timezone(self) -> None:
        tz_env = os.environ.get("TZ")
        tzname = time.tzname
        self.clock.to_fxt(gmt(2024, 1, 15), "Europe/Berlin")
        self.clock.fxt_to_timestamp("2024-01-15 10:00")
        self.assertEqual(os.environ.get("TZ"), tz_env)
        self.assertEqual(time.tzname, tzname)

    def test_concurrent_conversions_match_sequential(self) -> None:
        instants = list(range(gmt(2023, 1, 1), gmt(2025, 1, 1), 7 * 3600 + 13))
        zones = ["GMT", NY_ZONE, "Europe/Berlin", "FXT"]
        jobs = [(t, zones[i % len(zones)]) for i, t in enumerate(instants)]
        expected = [self.clock.to_fxt(t, z) for t, z in jobs]
        with ThreadPoolExecutor(max_workers=8) as pool:
            actual = list(pool.map(lambda job: FxtClock().to_fxt(*job), jobs))
        self.assertEqual(actual, expected)


class TestFromFxt(unittest.TestCase):
    def test_round_trip_away_from_transitions(self) -> None:
        clock = FxtClock()
        transitions = [
            r.instant for r in get_transition_table(NY_ZONE)
            if gmt(2022, 12, 1) <= r.instant <= gmt(2025, 2, 1)
        ]
        checked = 0
        for t in range(gmt(2023, 1, 1), gmt(2025, 1, 1), HOUR + 7):
            if any(abs(t - tr) < 12 * HOUR for tr in transitions):
                continue
            self.assertEqual(clock.from_fxt(clock.to_fxt(t)), t)
            checked += 1
        self.assertGreater(checked, 17000)


class TestFxtOffset(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FxtClock()
        self.spring = gmt(2024, 3, 10, 7)
        self.fall = gmt(2024, 11, 3, 6)

    def test_offset_with_transitions(self) -> None:
        query = self.clock.fxt_offset_from_gmt(gmt(2024, 7, 1))
        self.assertEqual(query.offset, 3 * HOUR)
        self.assertEqual(query.prev_transition, Transition(self.spring, 2 * HOUR, 3 * HOUR))
        self.assertEqual(query.next_transition, Transition(self.fall, 3 * HOUR, 2 * HOUR))

    def test_straddling_a_transition_differs_by_one_hour(self) -> None:
        before = self.clock.fxt_offset_from_gmt(self.spring - 1).offset
        after = self.clock.fxt_offset_from_gmt(self.spring).offset
        self.assertEqual(after - before, HOUR)
        before = self.clock.fxt_offset_from_gmt(self.fall - 1).offset
        after = self.clock.fxt_offset_from_gmt(self.fall).offset
        self.assertEqual(before - after, HOUR)

    def test_before_first_transition_is_unknown(self) -> None:
        first = get_transition_table(NY_ZONE)[0]
        query = self.clock.fxt_offset_from_gmt(first.instant - 1)
        self.assertIsNone(query.offset)
        self.assertIsNone(query.prev_transition)
        self.assertEqual(query.next_transition.instant, first.instant)
        self.assertIsNone(query.next_transition.offset_before)
        self.assertEqual(query.next_transition.offset_after, first.offset + FXT_SHIFT)

    def test_within_first_period(self) -> None:
        table = get_transition_table(NY_ZONE)
        query = self.clock.fxt_offset_from_gmt(table[0].instant)
        self.assertEqual(query.offset, 2 * HOUR)
        self.assertEqual(query.prev_transition, Transition(table[0].instant, None, 2 * HOUR))
        self.assertEqual(query.next_transition.instant, table[1].instant)


class TestFxtText(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FxtClock()

    def test_parse_fxt_midnight(self) -> None:
        self.assertEqual(self.clock.fxt_to_timestamp("2024-01-16 00:00:00"), gmt(2024, 1, 15, 22))
        self.assertEqual(self.clock.fxt_to_timestamp("2024-07-16 00:00"), gmt(2024, 7, 15, 21))

    def test_parse_then_convert_back(self) -> None:
        for text, fxt in (("2024-01-16 00:00:00", gmt(2024, 1, 16)), ("2024-07-16 09:30", gmt(2024, 7, 16, 9, 30))):
            self.assertEqual(self.clock.to_fxt(self.clock.fxt_to_timestamp(text)), fxt)

    def test_explicit_offset_is_honoured(self) -> None:
        self.assertEqual(
            self.clock.fxt_to_timestamp("2024-01-16 00:00:00+00:00"),
            gmt(2024, 1, 16) - FXT_SHIFT,
        )

    def test_unparsable_text(self) -> None:
        for text in ("not a date", "", "2024-13-45"):
            with self.assertRaises(InvalidArgumentError):
                self.clock.fxt_to_timestamp(text)

    def test_fxt_date(self) -> None:
        self.assertEqual(self.clock.fxt_date(gmt(2024, 1, 15, 22)), "2024-01-16 00:00:00")
        self.assertEqual(self.clock.fxt_date(gmt(2024, 7, 15, 12), "%H:%M"), "15:00")


if __name__ == '__main__':
    unittest.main()
