from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from .aggregate import build_day
from .client import ApiClient
from .render import MarkdownRenderer
from .utils import parse_date, progress_print

RENDERED = "rendered"
SKIPPED  = "skipped"
FAILED   = "failed"


@dataclass(frozen=True)
class DayResult:
    day: date
    status: str
    entries: int = 0
    path: Optional[Path] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status != FAILED


class DailyPipeline:
    """Fetch, sort and render a single day."""

    def __init__(self, client: ApiClient, renderer: MarkdownRenderer, tz_name: str, quiet: bool=False):
        self.client = client
        self.renderer = renderer
        self.tz_name = tz_name
        self.quiet = quiet

    def run(self, day) -> DayResult:
        d = parse_date(day)
        progress_print(f"[Day] Fetching lifelogs for {d} ({self.tz_name})...", self.quiet)
        entries = build_day(self.client, self.tz_name, d)
        path = self.renderer.render(d.isoformat(), self.tz_name, entries)
        progress_print(f"[Day] {d}: {len(entries)} entries -> {path}", self.quiet)
        return DayResult(day=d, status=RENDERED, entries=len(entries), path=path)

    def attempt(self, day: date) -> DayResult:
        """Like run(), but a failure comes back as a FAILED result instead of raising."""
        try:
            return self.run(day)
        except Exception as e:
            return DayResult(day=day, status=FAILED, error=e)
