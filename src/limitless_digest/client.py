from __future__ import annotations

import math
import time as _time_module
from typing import Any, Callable, Dict, List, Optional

import requests

from .errors import MalformedResponse, UpstreamError, UpstreamUnavailable
from .utils import eprint
from .windows import TimeWindow

# ── Constants ────────────────────────────────────────────────────────────────
API_BASE_URL         = "https://api.limitless.ai"
API_VERSION          = "v1"
LIFELOGS_ENDPOINT    = "lifelogs"
PAGE_LIMIT           = 10
MAX_PAGES_PER_WINDOW = 20
MAX_RETRIES          = 3
FALLBACK_RETRY_DELAY = 2.0
MAX_RETRY_DELAY      = 120.0
REQUEST_TIMEOUT      = 300

CONTENT_FLAGS = {
    "includeMarkdown": "true",
    "includeHeadings": "true",
    "includeContents": "false",
}


# ── Response shape probing ───────────────────────────────────────────────────
def _at(*path: str) -> Callable[[Any], Any]:
    def extract(body: Any) -> Any:
        node = body
        for key in path:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node
    extract.__name__ = "." + ".".join(path) if path else "<top>"
    return extract

# Known homes of the item list, most specific shapes last.
ITEM_LOCATIONS = (
    _at(),
    _at("lifelogs"),
    _at("items"),
    _at("results"),
    _at("data"),
    _at("data", "lifelogs"),
    _at("data", "items"),
    _at("data", "results"),
)

CURSOR_LOCATIONS = (
    _at("nextCursor"),
    _at("meta", "nextCursor"),
    _at("meta", "lifelogs", "nextCursor"),
    _at("data", "nextCursor"),
)

def extract_items(body: Any) -> List[Dict[str, Any]]:
    for extractor in ITEM_LOCATIONS:
        found = extractor(body)
        if isinstance(found, list):
            return found
    return []

def extract_cursor(body: Any) -> Optional[str]:
    for extractor in CURSOR_LOCATIONS:
        found = extractor(body)
        if isinstance(found, str) and found:
            return found
    return None

def truncation_marker(window: TimeWindow, cursor: str) -> Dict[str, Any]:
    return {
        "id": f"truncated-{window.start:%Y-%m-%d-%H}",
        "title": f"Truncated: more than {MAX_PAGES_PER_WINDOW} pages in {window.label}",
        "markdown": (
            f"_Fetching stopped after {MAX_PAGES_PER_WINDOW} pages of {PAGE_LIMIT} entries; "
            f"later entries of the {window.label} window are missing._"
        ),
        "startTime": window.end.isoformat(),
        "truncated": True,
        "window": window.label,
        "nextCursor": cursor,
    }

def _retry_delay(resp: Optional[requests.Response]) -> float:
    if resp is not None:
        ra = resp.headers.get("Retry-After")
        if ra:
            try:
                wait = float(ra)
            except ValueError:
                wait = None
            if wait is not None and math.isfinite(wait):
                return min(max(0.0, wait), MAX_RETRY_DELAY)
    return FALLBACK_RETRY_DELAY


# ── HTTP & Pagination ────────────────────────────────────────────────────────
class ApiClient:
    def __init__(self, api_key: str, verbose: bool=False,
                 session: Optional[requests.Session]=None,
                 sleep: Optional[Callable[[float], None]]=None,
                 base_url: str=API_BASE_URL):
        self.key = api_key
        self.verbose = verbose
        self.session = session or requests.Session()
        self.sleep = sleep or _time_module.sleep
        self.base_url = base_url.rstrip("/")

    def _log(self, msg: str):
        eprint(f"[API] {msg}", self.verbose)

    def request(self, endpoint: str, params: Dict[str,Any]) -> Any:
        """GET one page, retrying 429/5xx and transport failures up to MAX_RETRIES times."""
        url = f"{self.base_url}/{API_VERSION}/{endpoint.lstrip('/')}"
        headers = {"X-API-Key": self.key, "Accept": "application/json"}
        self._log(f"GET {url} params={params}")
        last_status: Optional[int] = None
        last_body: Optional[str] = None
        for attempt in range(1, MAX_RETRIES + 2):
            resp: Optional[requests.Response] = None
            try:
                resp = self.session.get(url, headers=headers, params=dict(params), timeout=REQUEST_TIMEOUT)
            except (requests.ConnectionError, requests.Timeout) as e:
                last_status, last_body = None, str(e)
            except requests.RequestException as e:
                raise UpstreamError(f"Request to {url} failed: {e}", None, str(e)) from e
            else:
                if resp.status_code == 200:
                    try:
                        return resp.json()
                    except ValueError:
                        raise MalformedResponse(f"Undecodable response body from {url}",
                                                resp.status_code, resp.text) from None
                last_status, last_body = resp.status_code, resp.text
                if resp.status_code != 429 and resp.status_code < 500:
                    raise UpstreamError(f"HTTP {resp.status_code} from {url}", resp.status_code, resp.text)
            if attempt > MAX_RETRIES:
                break
            wait = _retry_delay(resp)
            self._log(f"Attempt {attempt} failed (status {last_status}); retrying in {wait}s...")
            self.sleep(wait)
        raise UpstreamUnavailable(
            f"{url} still failing after {MAX_RETRIES} retries (last status {last_status})",
            last_status, last_body,
        )

    def fetch_window(self, tz_name: str, window: TimeWindow) -> List[Dict[str,Any]]:
        """Fetch every entry of one window, following cursors for at most MAX_PAGES_PER_WINDOW pages."""
        base = {"timezone": tz_name, **window.api_params(), **CONTENT_FLAGS, "limit": PAGE_LIMIT}
        items: List[Dict[str,Any]] = []
        cursor: Optional[str] = None
        pages = 0
        while True:
            params = dict(base)
            if cursor:
                params["cursor"] = cursor
            body = self.request(LIFELOGS_ENDPOINT, params)
            pages += 1
            found = extract_items(body)
            page_items = [i for i in found if isinstance(i, dict)]
            if len(page_items) != len(found):
                eprint(f"[Fetch] {window.label}: dropped {len(found) - len(page_items)} non-object items", self.verbose)
            items.extend(page_items)
            cursor = extract_cursor(body)
            eprint(f"[Fetch] {window.label} page {pages}: {len(page_items)} items, total {len(items)}", self.verbose)
            if not cursor:
                break
            if pages >= MAX_PAGES_PER_WINDOW:
                eprint(f"[Fetch] {window.label}: page cap of {MAX_PAGES_PER_WINDOW} reached; truncating.", True)
                items.append(truncation_marker(window, cursor))
                break
        return items
