#!/usr/bin/env python3
"""
Limitless Daily Digest – v0.1.0

Fetches a day of lifelogs from the Limitless API hour by hour and writes them
to a Markdown document, or backfills a range of days with a resume cursor.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from . import __version__
from .backfill import BackfillController
from .client import ApiClient
from .config import Settings
from .errors import LimitlessError
from .pipeline import DailyPipeline
from .render import MarkdownRenderer
from .store import JsonFileStore
from .utils import DEFAULT_TZ, get_tz, progress_print
from .windows import plan_day


def build_pipeline(settings: Settings) -> DailyPipeline:
    client = ApiClient(settings.require_api_key(), verbose=settings.verbose)
    renderer = MarkdownRenderer(settings.output_dir, settings.suffix, verbose=settings.verbose)
    return DailyPipeline(client, renderer, get_tz(settings.timezone).key, quiet=settings.quiet)

# ── Command Handlers ────────────────────────────────────────────────────────
def handle_daily(args, settings: Settings) -> int:
    day = settings.target_date()
    pipeline = build_pipeline(settings)
    pipeline.run(day)
    return 0

def handle_backfill(args, settings: Settings) -> int:
    start, end = settings.require_backfill_range()
    pipeline = build_pipeline(settings)
    controller = BackfillController(
        pipeline,
        JsonFileStore(settings.state_file, verbose=settings.verbose),
        pipeline.renderer.existing_days,
        overwrite=settings.overwrite,
        quiet=settings.quiet,
    )
    if args.reset_cursor:
        progress_print("[Backfill] Clearing resume cursor.", settings.quiet)
        controller.reset()
    results = controller.run(start, end)
    return 0 if all(r.ok for r in results) else 1

def handle_windows(args, settings: Settings) -> int:
    for w in plan_day(args.day, get_tz(settings.timezone)):
        print(f"{w.label}  {w.start.isoformat()}  {w.start_utc:%Y-%m-%dT%H:%M}Z -> {w.end_utc:%Y-%m-%dT%H:%M}Z")
    return 0

# ── CLI Setup ────────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="limitless-digest",
                                     description="Limitless daily digest - render lifelogs into daily Markdown documents")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output for debugging.")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress messages to stderr.")
    parser.add_argument("--timezone", type=str, help=f"Timezone for day boundaries (default: {DEFAULT_TZ}).")
    parser.add_argument("--output-dir", type=str, help="Directory the daily documents are written to.")
    parser.add_argument("--state-file", type=str, help="JSON file holding the backfill resume cursor.")
    parser.add_argument("--suffix", type=str, help="Document name suffix after the date (default: Lifelogs).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subs = parser.add_subparsers(dest="cmd", title="Commands", required=True)

    p_daily = subs.add_parser("daily", help="Render one day (yesterday by default).")
    day_group = p_daily.add_mutually_exclusive_group()
    day_group.add_argument("--date", type=str, metavar="YYYY-MM-DD", help="Render this specific date.")
    day_group.add_argument("--today", action="store_true", help="Render today instead of yesterday.")
    p_daily.set_defaults(func=handle_daily)

    p_back = subs.add_parser("backfill", help="Render every day of a date range, resuming where the last run stopped.")
    p_back.add_argument("--start", type=str, metavar="YYYY-MM-DD", help="First day of the range.")
    p_back.add_argument("--end", type=str, metavar="YYYY-MM-DD", help="Last day of the range (inclusive).")
    p_back.add_argument("--overwrite", action="store_true", help="Re-render days that already have a document.")
    p_back.add_argument("--reset-cursor", action="store_true", help="Forget the saved resume cursor before starting.")
    p_back.set_defaults(func=handle_backfill)

    p_win = subs.add_parser("windows", help="Print the hour windows planned for a date.")
    p_win.add_argument("day", type=str, metavar="YYYY-MM-DD")
    p_win.set_defaults(func=handle_windows)
    return parser

def main(argv: Optional[List[str]]=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_args(args)
        return args.func(args, settings)
    except LimitlessError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

if __name__ == "__main__":
    sys.exit(main())
