from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set

from zoneinfo import ZoneInfo

from .sections import categorize, entry_text, entry_title, extract_sections, summarize
from .utils import eprint, get_tz

DEFAULT_SUFFIX = "Lifelogs"

SECTION_TITLES = (
    ("decisions", "Decisions"),
    ("action_items", "Action items"),
    ("risks", "Risks"),
)


def _parse_timestamp(value: Any, tz: ZoneInfo) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        ts = datetime.fromisoformat(text)
    except ValueError:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=tz)
    return ts.astimezone(tz)

def format_span(entry: Dict[str, Any], tz: ZoneInfo) -> str:
    start = _parse_timestamp(entry.get("startTime") or entry.get("start"), tz)
    end = _parse_timestamp(entry.get("endTime") or entry.get("end"), tz)
    if start and end:
        return f"{start:%H:%M}–{end:%H:%M}"
    if start:
        return f"{start:%H:%M}"
    return "--:--"


class MarkdownRenderer:
    """Writes one `YYYY-MM-DD <suffix>.md` document per day into `root`."""

    def __init__(self, root: Path, suffix: str=DEFAULT_SUFFIX, verbose: bool=False):
        self.root = Path(root)
        self.suffix = suffix
        self.verbose = verbose
        self._name_re = re.compile(rf"^(\d{{4}}-\d{{2}}-\d{{2}}) {re.escape(suffix)}\.md$")

    def path_for(self, day_label: str) -> Path:
        return self.root / f"{day_label} {self.suffix}.md"

    def existing_days(self) -> Set[str]:
        if not self.root.is_dir():
            return set()
        days = set()
        for p in self.root.iterdir():
            m = self._name_re.match(p.name)
            if m and p.is_file():
                days.add(m.group(1))
        return days

    def render(self, day_label: str, tz_name: str, entries: Sequence[Dict[str, Any]]) -> Path:
        path = self.path_for(day_label)
        path.parent.mkdir(parents=True, exist_ok=True)
        # write_text truncates, so a re-run replaces the day's document
        path.write_text(self.render_text(day_label, tz_name, entries), encoding="utf-8")
        eprint(f"[Render] wrote {path} ({len(entries)} entries)", self.verbose)
        return path

    def render_text(self, day_label: str, tz_name: str, entries: Sequence[Dict[str, Any]]) -> str:
        tz = get_tz(tz_name)
        out: List[str] = [f"# {day_label} {self.suffix}", ""]
        out.append(f"_Time zone: {tz_name} · {len(entries)} entries_")
        out.append("")
        if not entries:
            out.append("No lifelogs recorded for this day.")
            out.append("")
        for entry in entries:
            out.extend(self._render_entry(entry, tz))
        return "\n".join(out).rstrip() + "\n"

    def _render_entry(self, entry: Dict[str, Any], tz: ZoneInfo) -> List[str]:
        body = entry_text(entry).strip()
        lines = [f"## {format_span(entry, tz)} {entry_title(entry)}", ""]
        if entry.get("truncated"):
            lines += [body, ""]
            return lines
        lines.append(f"**Category:** {categorize(entry)}")
        summary = summarize(body)
        if summary:
            lines.append(f"**Summary:** {summary}")
        lines.append("")
        found = extract_sections(body)
        for key, heading in SECTION_TITLES:
            if found[key]:
                lines.append(f"**{heading}**")
                lines.extend(f"- {item}" for item in found[key])
                lines.append("")
        if body:
            lines += [body, ""]
        return lines
