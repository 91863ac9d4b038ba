from __future__ import annotations

import pytest

from limitless_digest import cli
from limitless_digest.backfill import CURSOR_KEY
from limitless_digest.pipeline import FAILED, RENDERED, DayResult
from limitless_digest.store import JsonFileStore


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    for name in ["LIMITLESS_API_KEY", "LIMITLESS_OUTPUT_DIR", "LIMITLESS_TIMEZONE", "LIMITLESS_DATE",
                 "LIMITLESS_RUN_TODAY", "LIMITLESS_BACKFILL_START", "LIMITLESS_BACKFILL_END",
                 "LIMITLESS_BACKFILL_OVERWRITE", "LIMITLESS_STATE_FILE", "LIMITLESS_DOC_SUFFIX"]:
        monkeypatch.delenv(name, raising=False)


def test_windows_command_needs_no_api_key(capsys):
    assert cli.main(["--timezone", "UTC", "windows", "2025-01-15"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 24
    assert lines[0].startswith("00:00-01:00")


def test_daily_without_api_key_fails(tmp_path, capsys):
    assert cli.main(["--output-dir", str(tmp_path), "daily", "--date", "2025-01-15"]) == 1
    assert "Missing LIMITLESS_API_KEY" in capsys.readouterr().err


def test_daily_invalid_date(monkeypatch, capsys):
    monkeypatch.setenv("LIMITLESS_API_KEY", "k")
    assert cli.main(["daily", "--date", "tomorrow-ish"]) == 1
    assert "Invalid date" in capsys.readouterr().err


def test_daily_runs_pipeline_for_forced_date(monkeypatch, tmp_path):
    monkeypatch.setenv("LIMITLESS_API_KEY", "k")
    ran = []
    monkeypatch.setattr(cli.DailyPipeline, "run", lambda self, day: ran.append((day, self.tz_name)))
    assert cli.main(["--timezone", "Europe/Berlin", "--output-dir", str(tmp_path),
                     "daily", "--date", "2025-01-15"]) == 0
    assert [(d.isoformat(), tz) for d, tz in ran] == [("2025-01-15", "Europe/Berlin")]


def test_backfill_reset_and_exit_status(monkeypatch, tmp_path):
    monkeypatch.setenv("LIMITLESS_API_KEY", "k")
    state = tmp_path / "state.json"
    JsonFileStore(state).set(CURSOR_KEY, "2025-01-02")
    attempted = []

    def attempt(self, day):
        attempted.append(day.isoformat())
        status = FAILED if day.day == 2 else RENDERED
        return DayResult(day=day, status=status, error=RuntimeError("x") if status == FAILED else None)

    monkeypatch.setattr(cli.DailyPipeline, "attempt", attempt)
    monkeypatch.setattr("limitless_digest.backfill._time_module.sleep", lambda s: None)
    code = cli.main(["--quiet", "--output-dir", str(tmp_path / "out"), "--state-file", str(state),
                     "backfill", "--start", "2025-01-01", "--end", "2025-01-03", "--reset-cursor"])

    assert code == 1
    assert attempted == ["2025-01-01", "2025-01-02", "2025-01-03"]
    assert JsonFileStore(state).get(CURSOR_KEY) == "2025-01-03"


def test_backfill_requires_range(monkeypatch, capsys):
    monkeypatch.setenv("LIMITLESS_API_KEY", "k")
    assert cli.main(["backfill", "--start", "2025-01-01"]) == 1
    assert "start and an end" in capsys.readouterr().err
