"""Public API for limitless_digest package."""

__version__ = "0.1.0"

from .aggregate import build_day
from .backfill import BackfillController
from .client import ApiClient
from .pipeline import DailyPipeline, DayResult
from .render import MarkdownRenderer
from .store import JsonFileStore
from .windows import TimeWindow, plan_day
from .cli import main

__all__ = [
    "ApiClient",
    "BackfillController",
    "DailyPipeline",
    "DayResult",
    "JsonFileStore",
    "MarkdownRenderer",
    "TimeWindow",
    "build_day",
    "main",
    "plan_day",
]
