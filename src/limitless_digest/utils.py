from __future__ import annotations

import sys
from datetime import date, datetime
from typing import Union

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import InvalidDate

# ── Constants ────────────────────────────────────────────────────────────────
DEFAULT_TZ       = "America/Detroit"
API_DATE_FMT     = "%Y-%m-%d"
API_DATETIME_FMT = "%Y-%m-%d %H:%M:%S"


# ── Output ───────────────────────────────────────────────────────────────────
def eprint(msg: str, verbose: bool=False):
    if verbose:
        print(msg, file=sys.stderr)

def progress_print(msg: str, quiet: bool=False):
    if not quiet:
        print(msg, file=sys.stderr)


# ── Dates & zones ────────────────────────────────────────────────────────────
def get_tz(name: Union[str, ZoneInfo, None]=DEFAULT_TZ) -> ZoneInfo:
    if isinstance(name, ZoneInfo):
        return name
    try:
        return ZoneInfo(name or DEFAULT_TZ)
    except (ZoneInfoNotFoundError, ValueError):
        print(f"Warning: Timezone '{name}' not found; falling back to UTC.", file=sys.stderr)
        return ZoneInfo("UTC")

def parse_date(s: Union[str, date]) -> date:
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    try:
        return datetime.strptime(str(s).strip(), API_DATE_FMT).date()
    except ValueError:
        raise InvalidDate(f"Invalid date '{s}' (expected YYYY-MM-DD).") from None
