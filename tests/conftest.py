from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import pytest
import requests


def make_response(status: int=200, body: Any=None, headers: Optional[Dict[str, str]]=None,
                  raw: Optional[bytes]=None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = raw if raw is not None else json.dumps(body if body is not None else {}).encode("utf-8")
    resp.headers.update(headers or {})
    resp.encoding = "utf-8"
    return resp


def page(items: List[Dict[str, Any]], cursor: Optional[str]=None) -> Dict[str, Any]:
    return {"data": {"lifelogs": items}, "meta": {"lifelogs": {"nextCursor": cursor, "count": len(items)}}}


class FakeSession:
    """Serves queued responses in order; an Exception in the queue is raised instead."""

    def __init__(self, responses=None, default=None):
        self.responses = list(responses or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": dict(headers or {}), "params": dict(params or {})})
        if self.responses:
            nxt = self.responses.pop(0)
        elif self.default is not None:
            nxt = self.default(url, params)
        else:
            raise AssertionError(f"unexpected request to {url} with {params}")
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float):
        self.calls.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()
