# topmark:header:start
#
#   project      : DJC
#   file         : test_invoker.py
#   file_relpath : tests/runtime/test_invoker.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the invocation lifecycle run by `CommandInvoker`."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from djc.config.app_config import AppConfig
from djc.config.env import EnvVar
from djc.core.context import CommandContext, InvocationState
from djc.core.errors import ClassifiedError, ErrorKind
from djc.runtime.exit import ExitController
from djc.runtime.invoker import CommandInvoker, Phase
from djc.runtime.reporter import OutputReporter
from tests.fakes import EchoCommand, RecordingConsole, RecordingExitController, RecordingTelemetry


@dataclass
class _Session:
    name: str = "dev"
    using_access_token: bool = False
    config_calls: int = 0

    async def get_config(self) -> Any:
        self.config_calls += 1
        return {"instance": "https://example.test"}


@dataclass
class _Harness:
    console: RecordingConsole = field(default_factory=RecordingConsole)
    telemetry: RecordingTelemetry = field(default_factory=RecordingTelemetry)
    exits: RecordingExitController = field(default_factory=RecordingExitController)

    def invoker(self) -> CommandInvoker:
        return CommandInvoker(OutputReporter(self.console), self.telemetry, self.exits)  # type: ignore[arg-type]


class _Greeter(EchoCommand):
    def get_pre_execute_message(self, session_config: Any) -> str | None:
        return f"Using {session_config['instance']}"


def test_success_path_reports_records_and_exits_once() -> None:
    h = _Harness()
    command = EchoCommand()
    context = CommandContext(flags={"a": 1, "b": 2})
    state = InvocationState()

    outcome = asyncio.run(h.invoker().invoke(command, context, state))

    assert outcome.succeeded
    assert outcome.result == {"a": 1, "b": 2}
    assert outcome.exit_code == 0
    assert h.console.out == ["Echoed 2 flag(s)"]
    assert h.telemetry.calls == [("djc:test:echo", None)]
    assert h.exits.codes == [None]
    assert state.exit_calls == 1
    assert outcome.phases == [
        Phase.IDLE,
        Phase.VALIDATING,
        Phase.PRE_EXECUTE_MESSAGE,
        Phase.SPINNING,
        Phase.EXECUTING,
        Phase.SUCCEEDED,
        Phase.TELEMETRY,
        Phase.EXITING,
        Phase.TERMINAL,
    ]


def test_execution_failure_is_reported_once_with_exit_code_1() -> None:
    h = _Harness()
    state = InvocationState()

    outcome = asyncio.run(
        h.invoker().invoke(EchoCommand(error=RuntimeError("kaput")), CommandContext(), state)
    )

    assert not outcome.succeeded
    assert outcome.error is not None and outcome.error.message == "kaput"
    assert outcome.exit_code == 1
    assert state.exit_code == 1
    assert h.console.err == ["ERROR: kaput."]
    assert h.console.out == []
    assert h.telemetry.calls[0][1] is outcome.error
    assert h.exits.codes == [1]
    assert Phase.FAILED in outcome.phases
    assert Phase.SUCCEEDED not in outcome.phases


def test_validation_failure_skips_execution() -> None:
    h = _Harness()
    command = EchoCommand(validation_error=ClassifiedError("bad flags", name="ValidationError"))

    outcome = asyncio.run(h.invoker().invoke(command, CommandContext()))

    assert command.executed == 0
    assert outcome.error is not None and outcome.error.kind is ErrorKind.VALIDATION
    assert outcome.phases[:3] == [Phase.IDLE, Phase.VALIDATING, Phase.FAILED]
    assert outcome.exit_code == 1
    assert len(h.exits.codes) == 1


def test_session_config_and_pre_execute_message_in_human_mode() -> None:
    h = _Harness()
    session = _Session()
    context = CommandContext(session=session, requires_workspace=True)

    outcome = asyncio.run(h.invoker().invoke(_Greeter(), context))

    assert session.config_calls == 1
    assert Phase.SESSION_CONFIG in outcome.phases
    assert h.console.out[0] == "Using https://example.test\n"


def test_session_config_is_skipped_in_machine_mode() -> None:
    h = _Harness()
    session = _Session()
    context = CommandContext(session=session, requires_workspace=True, json=True)

    outcome = asyncio.run(h.invoker().invoke(_Greeter(), context))

    assert session.config_calls == 0
    assert Phase.SESSION_CONFIG not in outcome.phases


def test_spinner_runs_during_execute_and_is_stopped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(EnvVar.SHOW_SPINNER, "1")
    h = _Harness()
    command = EchoCommand(error=RuntimeError("x"))
    context = CommandContext(show_progress=True)

    asyncio.run(h.invoker().invoke(command, context))

    assert command.spinning_during_execute is True
    assert context.spinner is None


def test_reporter_failure_does_not_break_the_pipeline() -> None:
    h = _Harness()

    class _BrokenReporter(OutputReporter):
        def error(self, command: Any, context: Any, err: Any) -> Any:
            raise OSError("stderr closed")

    invoker = CommandInvoker(_BrokenReporter(h.console), h.telemetry, h.exits)  # type: ignore[arg-type]
    outcome = asyncio.run(invoker.invoke(EchoCommand(error=RuntimeError("x")), CommandContext()))

    assert outcome.exit_code == 1
    assert len(h.telemetry.calls) == 1
    assert len(h.exits.codes) == 1


def test_command_may_override_the_success_exit_code() -> None:
    class _Partial(EchoCommand):
        async def execute(self, context: CommandContext) -> Any:
            assert context.invocation is not None
            context.invocation.exit_code = 3
            return {}

    h = _Harness()
    outcome = asyncio.run(h.invoker().invoke(_Partial(), CommandContext(json=True)))

    assert outcome.exit_code == 3
    assert '"status": 3' in h.console.stdout


def test_hard_exit_terminates_with_the_pending_code() -> None:
    h = _Harness()
    terminated: list[int] = []
    controller = ExitController(
        terminate=terminated.append,
        app_config_loader=AppConfig,
        error_level=lambda: True,
    )
    invoker = CommandInvoker(OutputReporter(h.console), h.telemetry, controller)  # type: ignore[arg-type]

    asyncio.run(invoker.invoke(EchoCommand(error=RuntimeError("x")), CommandContext()))

    assert terminated == [1]
