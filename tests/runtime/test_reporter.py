# topmark:header:start
#
#   project      : DJC
#   file         : test_reporter.py
#   file_relpath : tests/runtime/test_reporter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for `OutputReporter`: human and machine rendering of outcomes."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import pytest

from djc.config.env import EnvVar
from djc.core.command import BaseCommand, Column, Empty, Message, RowSet, TableSet
from djc.core.context import CommandContext
from djc.core.errors import ClassifiedError, ErrorKind, ReportableError, TabularPayload
from djc.runtime.reporter import OutputReporter, ensure_period, render_table
from tests.fakes import RecordingConsole


@dataclass
class _Session:
    name: str = "dev"
    using_access_token: bool = True

    async def get_config(self) -> Any:
        return {}


class _Apologetic(BaseCommand):
    def get_human_error_message(self, error: ReportableError) -> str | None:
        return "Something went sideways"


def _reporter() -> tuple[OutputReporter, RecordingConsole]:
    console = RecordingConsole()
    return OutputReporter(console), console


def _error(message: str = "Bad input", **kwargs: Any) -> ReportableError:
    return ReportableError.from_exception(ClassifiedError(message, **kwargs))


def test_ensure_period() -> None:
    assert ensure_period("Done") == "Done."
    assert ensure_period("Done.") == "Done."


def test_render_table_pads_columns() -> None:
    text = render_table([("a", "A"), ("b", "Long")], [{"a": "xyz", "b": 1}, {"a": None}])
    lines = text.splitlines()

    assert lines[0] == "A    Long"
    assert set(lines[1].replace(" ", "")) == {"─"}
    assert lines[2] == "xyz  1"
    assert lines[3] == ""


def test_machine_success_prints_envelope() -> None:
    reporter, console = _reporter()
    reporter.success(BaseCommand(), CommandContext(json=True), {"n": 1}, status=0)

    assert json.loads(console.stdout) == {"status": 0, "result": {"n": 1}}
    assert console.err == []


def test_content_type_env_selects_machine_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(EnvVar.CONTENT_TYPE, "json")
    reporter, console = _reporter()
    reporter.success(BaseCommand(), CommandContext(), [1, 2])

    assert json.loads(console.stdout)["result"] == [1, 2]


def test_human_render_variants() -> None:
    reporter, console = _reporter()
    reporter.render(Empty())
    reporter.render(Empty("Nothing here"))
    reporter.render(Message(""))
    reporter.render(Message("Hello"))

    assert console.out == ["No results found.", "Nothing here", "Hello"]


def test_human_rowset_prints_title_then_table() -> None:
    reporter, console = _reporter()
    reporter.render(RowSet(columns=(Column("k", "Key"),), rows=({"k": "v"},), title="Files split."))

    assert console.out[0] == "Files split."
    assert console.out[1].splitlines()[0] == "Key"


def test_human_tableset_renders_each_table() -> None:
    reporter, console = _reporter()
    reporter.render(
        TableSet(
            {
                "first": RowSet(columns=(Column("k", "K"),), rows=({"k": 1},)),
                "second": Empty("None left"),
            }
        )
    )

    assert "None left" in console.out
    assert console.out[0].startswith("K")


def test_human_error_with_action_warns_remediation() -> None:
    reporter, console = _reporter()
    reported = reporter.error(None, CommandContext(), _error(action="Run it again"))

    assert console.err == ["ERROR: Bad input."]
    assert console.warnings == ["Try this: Run it again"]
    assert reported.action == "Run it again"


def test_human_error_plain_gets_period() -> None:
    reporter, console = _reporter()
    reporter.error(BaseCommand(), CommandContext(), _error("Nope."))

    assert console.err == ["ERROR: Nope."]
    assert console.warnings == []


def test_command_can_override_human_error_message() -> None:
    reporter, console = _reporter()
    reporter.error(_Apologetic(), CommandContext(), _error())

    assert console.err == ["ERROR: Something went sideways."]


def test_tabular_error_renders_table_only() -> None:
    reporter, console = _reporter()
    rows = [{"field": "name", "problem": "missing"}]
    reporter.error(
        None,
        CommandContext(),
        _error(tabular=TabularPayload(columns=["field", "problem"], rows=rows), action="x"),
    )

    assert len(console.err) == 1
    assert "missing" in console.err[0]
    assert console.warnings == []


def test_machine_error_goes_to_stderr_as_json() -> None:
    reporter, console = _reporter()
    reporter.error(None, CommandContext(json=True), _error(name=ErrorKind.VALIDATION.value))

    payload = json.loads(console.stderr)
    assert payload["name"] == "ValidationError"
    assert payload["status"] == 1
    assert payload["message"] == "Bad input"
    assert "action" not in payload
    assert console.out == []


def test_expired_token_session_gets_remediation() -> None:
    reporter, console = _reporter()
    context = CommandContext(json=True, session=_Session())
    reported = reporter.error(None, context, _error("Session expired or invalid"))

    assert reported.kind is ErrorKind.SESSION_EXPIRED
    assert reported.action is not None
    assert json.loads(console.stderr)["action"] == reported.action


def test_expired_session_without_token_is_left_alone() -> None:
    reporter, _console = _reporter()
    context = CommandContext(session=_Session(using_access_token=False))
    reported = reporter.error(None, context, _error("Session expired or invalid"))

    assert reported.action is None
    assert reported.kind is ErrorKind.GENERIC_EXECUTION
