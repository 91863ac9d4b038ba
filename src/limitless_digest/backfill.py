"""Resumable day-by-day backfill over a closed date range.

The persisted cursor records the last day whose attempt finished, whatever
the outcome. It is written after each attempt and never before, so a crash
mid-day leaves the cursor on the previous day and a restart re-attempts the
in-flight one. Re-rendering a day replaces its document, so that retry is safe.

Only one backfill is expected to run against a given state file and output
directory at a time; nothing here guards against overlapping runs.
"""

from __future__ import annotations

import time as _time_module
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional

from .errors import InvalidDate
from .pipeline import SKIPPED, DailyPipeline, DayResult
from .store import KeyValueStore
from .utils import parse_date, progress_print

CURSOR_KEY    = "backfill_cursor"
PACING_DELAY  = 2.0
SKIP_DELAY    = 0.5


class BackfillController:
    def __init__(self, pipeline: DailyPipeline, store: KeyValueStore,
                 list_existing: Callable[[], Iterable[str]],
                 overwrite: bool=False,
                 pacing_delay: float=PACING_DELAY,
                 skip_delay: float=SKIP_DELAY,
                 sleep: Optional[Callable[[float], None]]=None,
                 quiet: bool=False):
        self.pipeline = pipeline
        self.store = store
        self.list_existing = list_existing
        self.overwrite = overwrite
        self.pacing_delay = pacing_delay
        self.skip_delay = skip_delay
        self.sleep = sleep or _time_module.sleep
        self.quiet = quiet

    def cursor(self) -> Optional[date]:
        try:
            raw = self.store.get(CURSOR_KEY)
        except ValueError as e:
            progress_print(f"[Backfill] Ignoring unreadable state: {e}", False)
            return None
        if not raw:
            return None
        try:
            return parse_date(raw)
        except InvalidDate:
            progress_print(f"[Backfill] Ignoring unreadable resume cursor {raw!r}.", self.quiet)
            return None

    def reset(self):
        self.store.delete(CURSOR_KEY)

    def resume_from(self, start: date) -> date:
        saved = self.cursor()
        if saved is None:
            return start
        return max(saved, start)

    def run(self, start, end) -> List[DayResult]:
        start, end = parse_date(start), parse_date(end)
        if start > end:
            raise InvalidDate(f"Backfill start {start} is after end {end}.")
        day = self.resume_from(start)
        if day != start:
            progress_print(f"[Backfill] Resuming at {day} (range {start} to {end}).", self.quiet)
        existing = set(self.list_existing())

        results: List[DayResult] = []
        while day <= end:
            label = day.isoformat()
            if label in existing and not self.overwrite:
                progress_print(f"[Backfill] {label}: output exists, skipping.", self.quiet)
                results.append(DayResult(day=day, status=SKIPPED))
                self.store.set(CURSOR_KEY, label)
                day += timedelta(days=1)
                self.sleep(self.skip_delay)
                continue

            result = self.pipeline.attempt(day)
            results.append(result)
            if result.ok:
                progress_print(f"[Backfill] {label}: {result.entries} entries.", self.quiet)
            else:
                progress_print(f"[Backfill] {label} failed: {type(result.error).__name__}: {result.error}", False)
            self.store.set(CURSOR_KEY, label)
            day += timedelta(days=1)
            if day <= end:
                self.sleep(self.pacing_delay)

        failed = sum(1 for r in results if not r.ok)
        progress_print(f"[Backfill] Done: {len(results)} days, {failed} failed.", self.quiet)
        return results
