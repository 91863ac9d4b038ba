"""Hour-window planning for a single local calendar day.

The lifelogs API caps a page at 10 entries, so a day is queried as 24
independent one-hour windows. Windows are wall-clock aligned in the target
zone: on a spring-forward day the skipped hour yields a window of zero real
length, and on a fall-back day the repeated hour yields a two-hour window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, List, Union

from zoneinfo import ZoneInfo

from .utils import API_DATETIME_FMT, get_tz, parse_date

HOURS_PER_DAY = 24


@dataclass(frozen=True)
class TimeWindow:
    """One wall-clock hour of a local day.

    `start < end` holds in wall-clock time; in absolute time `start_utc <= end_utc`,
    and the window covering the hour skipped at a spring-forward change is empty.
    """

    start: datetime
    end: datetime
    label: str

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeWindow bounds must be timezone-aware")
        if not self.start < self.end:
            raise ValueError(f"TimeWindow start {self.start} is not before end {self.end}")
        if self.start_utc > self.end_utc:
            raise ValueError(f"TimeWindow start {self.start} is after end {self.end} in absolute time")

    @property
    def start_utc(self) -> datetime:
        return self.start.astimezone(timezone.utc)

    @property
    def end_utc(self) -> datetime:
        return self.end.astimezone(timezone.utc)

    def api_params(self) -> Dict[str, str]:
        # The API reads start/end as wall-clock time in its `timezone` param.
        return {
            "start": self.start.strftime(API_DATETIME_FMT),
            "end": self.end.strftime(API_DATETIME_FMT),
        }


def plan_day(day: Union[date, str], tz: Union[ZoneInfo, str]) -> List[TimeWindow]:
    """Return the 24 contiguous hour windows of `day` in zone `tz`."""
    d = parse_date(day)
    zone = get_tz(tz)
    bounds = [datetime.combine(d, time(hour), tzinfo=zone) for hour in range(HOURS_PER_DAY)]
    bounds.append(datetime.combine(d + timedelta(days=1), time.min, tzinfo=zone))
    return [
        TimeWindow(start=bounds[h], end=bounds[h + 1], label=f"{h:02d}:00-{h + 1:02d}:00")
        for h in range(HOURS_PER_DAY)
    ]
