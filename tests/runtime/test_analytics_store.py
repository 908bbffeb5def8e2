# topmark:header:start
#
#   project      : DJC
#   file         : test_analytics_store.py
#   file_relpath : tests/runtime/test_analytics_store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the telemetry store, the execution journal and the usage sinks."""

from __future__ import annotations

import json
import subprocess
from typing import TYPE_CHECKING, Any

import pytest

from djc.runtime.analytics import ExecutionJournal, ReportDirectorySink, SubprocessAnalyticsSource
from djc.runtime.telemetry import UsageRecord
from djc.runtime.telemetry_store import JsonFileTelemetryStore

if TYPE_CHECKING:
    from pathlib import Path


def test_store_keeps_features_apart(tmp_path: Path) -> None:
    store = JsonFileTelemetryStore(tmp_path / "state" / "djc-usage.json")

    assert store.load("usage") == {}
    store.save("usage", {"startTime": 1})
    store.save("other", {"x": True})

    assert store.load("usage") == {"startTime": 1}
    assert store.load("other") == {"x": True}


def test_store_rejects_non_object_documents(tmp_path: Path) -> None:
    path = tmp_path / "djc-usage.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        JsonFileTelemetryStore(path).load("usage")


def test_journal_records_fetches_and_clears(tmp_path: Path) -> None:
    journal = ExecutionJournal(tmp_path / "j.jsonl")
    assert journal.fetch() == []

    journal.record({"command": "a"})
    with journal.path.open("a", encoding="utf-8") as fh:
        fh.write("not json\n\n[1]\n")
    journal.record({"command": "b"})

    assert [e["command"] for e in journal.fetch()] == ["a", "b"]
    journal.clear()
    assert journal.fetch() == []
    journal.clear()


def test_report_sink_writes_one_file_per_window(tmp_path: Path) -> None:
    sink = ReportDirectorySink(tmp_path / "usage")
    sink.submit([])
    assert not (tmp_path / "usage").exists()

    record = UsageRecord(
        command_key="c-1", command_name="c", version="1", usage_date="20240304", total_executions=2
    )
    sink.submit([record])

    data = json.loads((tmp_path / "usage" / "usage-20240304.json").read_text("utf-8"))
    assert data[0]["command_key"] == "c-1"
    assert data[0]["total_executions"] == 2


def _completed(returncode: int, stdout: str) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


def test_subprocess_source_parses_commands(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def _run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        calls.append(args)
        return _completed(0, json.dumps({"commands": [{"command": "c"}, "junk"]}))

    monkeypatch.setattr(subprocess, "run", _run)
    source = SubprocessAnalyticsSource("analytics-tool")

    assert source.fetch() == [{"command": "c"}]
    source.clear()
    source.record({"command": "ignored"})
    assert calls == [["analytics-tool", "analytics"], ["analytics-tool", "analytics:clear"]]


@pytest.mark.parametrize(("returncode", "stdout"), [(1, "{}"), (0, "garbage"), (0, "{}")])
def test_subprocess_source_is_empty_on_failure(
    monkeypatch: pytest.MonkeyPatch, returncode: int, stdout: str
) -> None:
    monkeypatch.setattr(subprocess, "run", lambda args, **kwargs: _completed(returncode, stdout))

    assert SubprocessAnalyticsSource("analytics-tool").fetch() == []
