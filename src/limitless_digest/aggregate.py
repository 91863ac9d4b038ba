from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Union

from .client import ApiClient
from .utils import eprint, get_tz
from .windows import plan_day


def start_key(entry: Dict[str, Any]) -> str:
    # Missing starts compare as "" and therefore sort first.
    value = entry.get("startTime") or entry.get("start") or ""
    return str(value)

def sort_entries(entries: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(entries, key=start_key)

def build_day(client: ApiClient, tz_name: str, day: Union[date, str]) -> List[Dict[str, Any]]:
    """Fetch all 24 windows of `day` in order and return the entries sorted by start time.

    A failure in any window propagates; no partial day is returned.
    """
    entries: List[Dict[str, Any]] = []
    for window in plan_day(day, get_tz(tz_name)):
        fetched = client.fetch_window(tz_name, window)
        eprint(f"[Day] {day} {window.label}: {len(fetched)} entries", client.verbose)
        entries.extend(fetched)
    return sort_entries(entries)
