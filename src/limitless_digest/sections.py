"""Heuristic text helpers used when rendering a day.

These are keyword scans over an entry's markdown body. They are best-effort:
a missed action item or an odd category tag is cosmetic, never an error.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

CATEGORY_KEYWORDS = (
    ("meeting",  ("meeting", "standup", "stand-up", "sync", "agenda", "retro", "1:1", "one-on-one")),
    ("call",     ("call", "phone", "zoom", "dial", "voicemail")),
    ("planning", ("plan", "roadmap", "schedule", "deadline", "milestone", "priorit")),
    ("learning", ("lecture", "podcast", "course", "tutorial", "learn", "read")),
    ("personal", ("family", "dinner", "lunch", "kids", "doctor", "gym", "weekend")),
)
DEFAULT_CATEGORY = "general"

SECTION_NAMES = ("decisions", "action_items", "risks")

_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s+(?P<text>.+?)\s*#*\s*$")
_SECTION_HEADINGS = {
    "decisions":    re.compile(r"\b(decisions?|decided|agreements?)\b", re.I),
    "action_items": re.compile(r"\b(action items?|next steps|to-?dos?|follow[- ]ups?)\b", re.I),
    "risks":        re.compile(r"\b(risks?|concerns?|blockers?|issues?)\b", re.I),
}
_INLINE_RE = re.compile(
    r"^\s*(?:[-*+]\s+)?(?:\*\*)?(?P<kind>decision|decided|action|todo|to-do|risk|concern)(?:\*\*)?\s*:\s*(?P<text>.+)$",
    re.I,
)
_INLINE_KINDS = {
    "decision": "decisions", "decided": "decisions",
    "action": "action_items", "todo": "action_items", "to-do": "action_items",
    "risk": "risks", "concern": "risks",
}
_BULLET_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+(?P<text>.+)$")


def entry_title(entry: Dict[str, Any]) -> str:
    title = entry.get("title")
    if title:
        return str(title).strip()
    for node in entry.get("contents") or []:
        if isinstance(node, dict) and str(node.get("type", "")).startswith("heading") and node.get("content"):
            return str(node["content"]).strip()
    heading = entry.get("heading")
    if heading:
        return str(heading).strip()
    return "Untitled"

def entry_text(entry: Dict[str, Any]) -> str:
    return str(entry.get("markdown") or entry.get("text") or "")

def categorize(entry: Dict[str, Any]) -> str:
    haystack = f"{entry_title(entry)}\n{entry_text(entry)}".lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in haystack for k in keywords):
            return category
    return DEFAULT_CATEGORY

def plain_text(markdown: str) -> str:
    lines = []
    for line in markdown.splitlines():
        if _HEADING_RE.match(line):
            continue
        line = re.sub(r"^\s*(?:>|[-*+]|\d+[.)])\s*", "", line)
        line = re.sub(r"[*_`]+", "", line)
        if line.strip():
            lines.append(line.strip())
    return " ".join(lines)

def summarize(text: str, limit: int=200) -> str:
    """First sentences of `text` (markdown stripped), clipped to `limit` chars."""
    flat = plain_text(text)
    if not flat:
        return ""
    summary = ""
    for sentence in re.split(r"(?<=[.!?])\s+", flat):
        candidate = f"{summary} {sentence}".strip()
        if len(candidate) > limit:
            break
        summary = candidate
    if not summary:
        summary = flat[:limit - 1].rstrip() + "…"
    elif len(summary) < len(flat):
        summary = summary.rstrip() if summary.endswith((".", "!", "?")) else summary.rstrip() + "…"
    return summary

def _section_for_heading(text: str) -> Optional[str]:
    for name in SECTION_NAMES:
        if _SECTION_HEADINGS[name].search(text):
            return name
    return None

def extract_sections(markdown: str) -> Dict[str, List[str]]:
    found: Dict[str, List[str]] = {name: [] for name in SECTION_NAMES}
    current: Optional[str] = None
    for line in markdown.splitlines():
        heading = _HEADING_RE.match(line)
        if heading:
            current = _section_for_heading(heading.group("text"))
            continue
        inline = _INLINE_RE.match(line)
        if inline:
            found[_INLINE_KINDS[inline.group("kind").lower()]].append(inline.group("text").strip())
            continue
        bullet = _BULLET_RE.match(line)
        if current and bullet:
            found[current].append(bullet.group("text").strip())
    return found
