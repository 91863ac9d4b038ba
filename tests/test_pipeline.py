from __future__ import annotations

from datetime import date

import pytest

from conftest import FakeSession, make_response, page
from limitless_digest.client import ApiClient
from limitless_digest.errors import UpstreamUnavailable
from limitless_digest.pipeline import FAILED, RENDERED, DailyPipeline
from limitless_digest.render import MarkdownRenderer

TZ = "America/Detroit"


def _one_entry_at_nine(url, params):
    if params["start"].endswith("09:00:00"):
        return make_response(200, page([{"id": "e1", "title": "Coffee chat",
                                         "startTime": params["start"].replace(" ", "T") + "-05:00"}]))
    return make_response(200, page([]))


def test_running_a_day_twice_leaves_one_document(tmp_path, sleeps):
    client = ApiClient("k", session=FakeSession(default=_one_entry_at_nine), sleep=sleeps)
    pipeline = DailyPipeline(client, MarkdownRenderer(tmp_path), TZ, quiet=True)

    first = pipeline.run(date(2025, 1, 15))
    second = pipeline.run("2025-01-15")

    assert first.status == second.status == RENDERED
    assert first.entries == 1
    assert first.path == second.path
    assert [p.name for p in tmp_path.iterdir()] == ["2025-01-15 Lifelogs.md"]


def test_run_raises_and_writes_nothing_on_fetch_failure(tmp_path, sleeps):
    client = ApiClient("k", session=FakeSession(default=lambda u, p: make_response(503, {})), sleep=sleeps)
    pipeline = DailyPipeline(client, MarkdownRenderer(tmp_path), TZ, quiet=True)

    with pytest.raises(UpstreamUnavailable):
        pipeline.run(date(2025, 1, 15))
    assert list(tmp_path.iterdir()) == []


def test_attempt_returns_failed_result(tmp_path, sleeps):
    client = ApiClient("k", session=FakeSession(default=lambda u, p: make_response(401, {})), sleep=sleeps)
    pipeline = DailyPipeline(client, MarkdownRenderer(tmp_path), TZ, quiet=True)

    result = pipeline.attempt(date(2025, 1, 15))
    assert result.status == FAILED
    assert not result.ok
    assert result.error.status_code == 401
