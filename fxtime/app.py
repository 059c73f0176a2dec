"""
Application entry point.

This module defines a simple command‑line interface to the FXT clock,
the trading calendar and the MyFX bar and tick readers.  It leverages
the modules under `fxtime/` to load configuration, convert and classify
timestamps, decode history files and generate reports.
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config.schema import Config, load_config
from .data.bar_data import bar_file_path, read_bar_file
from .data.instruments import load_instruments
from .data.models import TickLayout, Timeframe
from .data.tick_data import decode_ticks
from .errors import FxTimeError, InvalidArgumentError
from .reporting.report import generate_bar_report
from .timezones.calendar import TradingCalendar
from .timezones.fxt import FxtClock
from .utils.timeutils import format_gmt

logger = logging.getLogger(__name__)


def _setup_logging(level: str, verbose: bool) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )


def _fmt_offset(offset: Optional[int]) -> str:
    return "unknown" if offset is None else f"{offset:+d}"


def _fmt_time(instant: Optional[int]) -> str:
    return "unknown" if instant is None else f"{instant} ({format_gmt(instant)} GMT)"


def _cmd_fxt(args: argparse.Namespace, config: Config, clock: FxtClock) -> None:
    zone = args.zone or config.clock.default_zone
    fxt_time = clock.to_fxt(args.timestamp, zone)
    print(f"{fxt_time} {format_gmt(fxt_time)} FXT")


def _cmd_offset(args: argparse.Namespace, config: Config, clock: FxtClock) -> None:
    query = clock.fxt_offset_from_gmt(args.timestamp)
    print(f"offset: {_fmt_offset(query.offset)}")
    for label, transition in (('previous', query.prev_transition), ('next', query.next_transition)):
        if transition is None:
            print(f"{label}: unknown")
        else:
            print(
                f"{label}: {_fmt_time(transition.instant)} "
                f"{_fmt_offset(transition.offset_before)} -> {_fmt_offset(transition.offset_after)}"
            )


def _cmd_calendar(args: argparse.Namespace, config: Config, clock: FxtClock) -> None:
    zone = args.zone or config.clock.default_zone
    cal = TradingCalendar(clock)
    print(f"weekend: {cal.is_weekend(args.timestamp, zone)}")
    print(f"holiday: {cal.is_holiday(args.timestamp, zone)}")
    print(f"trading day: {cal.is_trading_day(args.timestamp, zone)}")


def _cmd_parse(args: argparse.Namespace, config: Config, clock: FxtClock) -> None:
    print(clock.fxt_to_timestamp(args.text))


def _cmd_bars(args: argparse.Namespace, config: Config, clock: FxtClock) -> None:
    instruments = load_instruments(
        config.resolve_path(config.data.instruments_file) if config.data.instruments_file else None
    )
    instrument = None
    if args.symbol:
        instrument = instruments.get(args.symbol.upper())
        if instrument is None:
            raise InvalidArgumentError(f"Unknown symbol: {args.symbol}")

    if args.file:
        path = args.file
    elif args.symbol:
        path = str(bar_file_path(config.resolve_path(config.data.bar_dir), args.symbol,
                                 Timeframe.from_label(args.timeframe)))
    else:
        raise InvalidArgumentError("Either a bar file or --symbol is required")

    logger.info("Reading bars from %s", path)
    bars = read_bar_file(path)
    print(f"bars: {len(bars)}")
    if bars:
        print(f"range: {format_gmt(bars[0].time)} - {format_gmt(bars[-1].time)} FXT")
    if args.report:
        generate_bar_report(bars, config.resolve_path(config.report.out_dir), instrument)


def _cmd_ticks(args: argparse.Namespace, config: Config, clock: FxtClock) -> None:
    layout = TickLayout.from_name(args.layout) if args.layout else config.tick_layout
    with open(args.file, 'rb') as fh:
        ticks = decode_ticks(fh.read(), layout)
    print(f"ticks: {len(ticks)} ({layout.value})")
    for tick in ticks[:args.head]:
        print(f"{tick.time_delta_ms:>10} bid={tick.bid} ask={tick.ask}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Forex Trading Time (FXT) tools")
    parser.add_argument('--config', default=None, help="Path to configuration YAML file")
    parser.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('fxt', help="Convert a timestamp to FXT")
    p.add_argument('timestamp', type=int, nargs='?', help="Seconds since the epoch (default: now)")
    p.add_argument('--zone', help="Zone of the timestamp (default from config)")
    p.set_defaults(func=_cmd_fxt)

    p = sub.add_parser('offset', help="Show the FXT offset and DST transitions around a GMT time")
    p.add_argument('timestamp', type=int, nargs='?', help="GMT seconds since the epoch (default: now)")
    p.set_defaults(func=_cmd_offset)

    p = sub.add_parser('calendar', help="Classify a timestamp as trading day, weekend or holiday")
    p.add_argument('timestamp', type=int)
    p.add_argument('--zone', help="Zone of the timestamp (default from config)")
    p.set_defaults(func=_cmd_calendar)

    p = sub.add_parser('parse', help="Convert FXT date/time text to a GMT timestamp")
    p.add_argument('text')
    p.set_defaults(func=_cmd_parse)

    p = sub.add_parser('bars', help="Decode a MyFX bar file")
    p.add_argument('file', nargs='?', help="Bar file (default: derived from --symbol and --timeframe)")
    p.add_argument('--symbol', help="Instrument symbol")
    p.add_argument('--timeframe', default='M1', help="Bar period label, e.g. M1 or H1")
    p.add_argument('--report', action='store_true', help="Write CSV, summary and chart")
    p.set_defaults(func=_cmd_bars)

    p = sub.add_parser('ticks', help="Decode a tick file")
    p.add_argument('file')
    p.add_argument('--layout', choices=[layout.value for layout in TickLayout],
                   help="Record layout (default from config)")
    p.add_argument('--head', type=int, default=10, help="Number of ticks to print")
    p.set_defaults(func=_cmd_ticks)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse command‑line arguments and dispatch to the selected command."""
    args = _build_parser().parse_args(argv)

    config = load_config(args.config) if args.config else Config()
    _setup_logging(config.logging.level, args.verbose)

    clock = FxtClock()
    try:
        args.func(args, config, clock)
    except FxTimeError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
