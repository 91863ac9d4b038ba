from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationMissing
from .render import DEFAULT_SUFFIX
from .store import DEFAULT_STATE_PATH
from .utils import DEFAULT_TZ, get_tz, parse_date

API_KEY_ENV_VAR    = "LIMITLESS_API_KEY"
DEFAULT_OUTPUT_DIR = Path.home() / ".limitless" / "digests"

_TRUE = {"1", "true", "yes", "on"}


def _flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in _TRUE

def _opt_date(value: Optional[str]) -> Optional[date]:
    return parse_date(value) if value else None


@dataclass
class Settings:
    api_key: Optional[str]
    output_dir: Path
    timezone: str = DEFAULT_TZ
    state_file: Path = DEFAULT_STATE_PATH
    suffix: str = DEFAULT_SUFFIX
    run_today: bool = False
    forced_date: Optional[date] = None
    backfill_start: Optional[date] = None
    backfill_end: Optional[date] = None
    overwrite: bool = False
    verbose: bool = False
    quiet: bool = False

    @classmethod
    def from_args(cls, args, environ: Mapping[str, str]=os.environ) -> "Settings":
        """Resolve settings: command-line flags, then environment, then defaults."""
        def pick(attr: str, env: str, default=None):
            value = getattr(args, attr, None)
            if value not in (None, ""):
                return value
            return environ.get(env) or default

        return cls(
            api_key=environ.get(API_KEY_ENV_VAR) or None,
            output_dir=Path(pick("output_dir", "LIMITLESS_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)).expanduser(),
            timezone=pick("timezone", "LIMITLESS_TIMEZONE", DEFAULT_TZ),
            state_file=Path(pick("state_file", "LIMITLESS_STATE_FILE", DEFAULT_STATE_PATH)).expanduser(),
            suffix=pick("suffix", "LIMITLESS_DOC_SUFFIX", DEFAULT_SUFFIX),
            run_today=bool(getattr(args, "today", False)) or _flag(environ, "LIMITLESS_RUN_TODAY"),
            forced_date=_opt_date(pick("date", "LIMITLESS_DATE")),
            backfill_start=_opt_date(pick("start", "LIMITLESS_BACKFILL_START")),
            backfill_end=_opt_date(pick("end", "LIMITLESS_BACKFILL_END")),
            overwrite=bool(getattr(args, "overwrite", False)) or _flag(environ, "LIMITLESS_BACKFILL_OVERWRITE"),
            verbose=bool(getattr(args, "verbose", False)),
            quiet=bool(getattr(args, "quiet", False)),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationMissing(f"Missing {API_KEY_ENV_VAR}")
        return self.api_key

    def require_backfill_range(self) -> tuple[date, date]:
        if not self.backfill_start or not self.backfill_end:
            raise ConfigurationMissing("Backfill needs both a start and an end date "
                                       "(--start/--end or LIMITLESS_BACKFILL_START/END).")
        return self.backfill_start, self.backfill_end

    def target_date(self, now: Optional[datetime]=None) -> date:
        """Forced date if set, else today or yesterday in the configured zone."""
        if self.forced_date:
            return self.forced_date
        today = (now or datetime.now(get_tz(self.timezone))).date()
        return today if self.run_today else today - timedelta(days=1)
