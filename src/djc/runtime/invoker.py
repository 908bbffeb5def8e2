# topmark:header:start
#
#   project      : DJC
#   file         : invoker.py
#   file_relpath : src/djc/runtime/invoker.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run one command through the full invocation lifecycle.

Phases, strictly in order and without backward edges::

    IDLE -> VALIDATING -> (SESSION_CONFIG) -> PRE_EXECUTE_MESSAGE -> SPINNING
         -> EXECUTING -> SUCCEEDED | FAILED -> TELEMETRY -> EXITING -> TERMINAL

A validation failure goes straight to FAILED. SESSION_CONFIG only happens for
commands that need a workspace and run against a session in human mode.
Whatever the path, the spinner is stopped, exactly one outcome is reported,
telemetry is recorded once and the exit controller is called once.

The invoker is the only place where an exception raised by a command turns
into a reported error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from djc.config.logging import get_logger
from djc.constants import VALUE_NOT_SET
from djc.core.context import InvocationState
from djc.core.errors import ReportableError
from djc.core.exit_codes import ExitCode
from djc.runtime.progress import start_progress, stop_progress

if TYPE_CHECKING:
    from collections.abc import Callable

    from djc.config.logging import DjcLogger
    from djc.core.command import Command
    from djc.core.context import CommandContext
    from djc.runtime.exit import ExitController
    from djc.runtime.reporter import OutputReporter
    from djc.runtime.telemetry import TelemetryAggregator

logger: DjcLogger = get_logger(__name__)


class Phase(str, Enum):
    """Lifecycle phases of an invocation."""

    IDLE = "idle"
    VALIDATING = "validating"
    SESSION_CONFIG = "session_config"
    PRE_EXECUTE_MESSAGE = "pre_execute_message"
    SPINNING = "spinning"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TELEMETRY = "telemetry"
    EXITING = "exiting"
    TERMINAL = "terminal"


@dataclass
class InvocationOutcome:
    """What came out of an invocation.

    Exactly one of ``result`` (on success) and ``error`` (on failure) is
    meaningful; ``error`` is None on success.

    Attributes:
        result (Any): The command's result on success.
        error (ReportableError | None): The reported error on failure.
        exit_code (int): The pending process exit code.
        phases (list[Phase]): Phases traversed, in order.
    """

    result: Any = None
    error: ReportableError | None = None
    exit_code: int = ExitCode.SUCCESS
    phases: list[Phase] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when the command completed without error."""
        return self.error is None


def determine_command_name(command: Command, context: CommandContext) -> str:
    """Return the name used for logging and telemetry."""
    if context.command_name:
        return context.command_name
    descriptor = getattr(command, "descriptor", None)
    if descriptor is not None:
        return str(descriptor.command_id)
    return type(command).__name__ or VALUE_NOT_SET


class CommandInvoker:
    """Orchestrate validation, execution, reporting, telemetry and exit.

    Args:
        reporter (OutputReporter): Renders the outcome.
        telemetry (TelemetryAggregator): Records usage after the outcome is reported.
        exit_controller (ExitController): Takes the final exit decision.
        progress_starter (Callable[[CommandContext], object]): Starts the
            progress indicator for a context (stores it on ``context.spinner``).
    """

    def __init__(
        self,
        reporter: OutputReporter,
        telemetry: TelemetryAggregator,
        exit_controller: ExitController,
        *,
        progress_starter: Callable[[CommandContext], object] = start_progress,
    ) -> None:
        self.reporter = reporter
        self.telemetry = telemetry
        self.exit_controller = exit_controller
        self.progress_starter = progress_starter

    async def invoke(
        self,
        command: Command,
        context: CommandContext,
        state: InvocationState | None = None,
    ) -> InvocationOutcome:
        """Run ``command`` with ``context`` and return its outcome.

        With a hard exit the process terminates inside this call (``SystemExit``
        propagates); with a soft exit the outcome is returned.
        """
        state = state or InvocationState()
        # only this invocation decides the exit code
        state.exit_code = None
        context.invocation = state

        name = determine_command_name(command, context)
        context.command_name = name
        logger.debug(
            "Invoking '%s' on session '%s' with parameters: %s",
            name,
            context.session_name(),
            context.flags_as_json(),
        )

        outcome = InvocationOutcome(phases=[Phase.IDLE])
        try:
            try:
                outcome.result = await self._execute(command, context, outcome.phases)
                outcome.phases.append(Phase.SUCCEEDED)
                stop_progress(context)
                self.reporter.success(
                    command,
                    context,
                    outcome.result,
                    status=state.exit_code or ExitCode.SUCCESS,
                )
            except Exception as exc:  # noqa: BLE001
                outcome.phases.append(Phase.FAILED)
                stop_progress(context)
                outcome.result = None
                outcome.error = self._report_error(command, context, exc, state)

            outcome.phases.append(Phase.TELEMETRY)
            await self.telemetry.record_completion(name, state, outcome.error)
            if outcome.error is not None:
                state.exit_code = ExitCode.FAILURE

            outcome.exit_code = int(state.exit_code or ExitCode.SUCCESS)
            outcome.phases.append(Phase.EXITING)
            await self.exit_controller.exit(context, state)
        finally:
            stop_progress(context)

        outcome.phases.append(Phase.TERMINAL)
        return outcome

    async def _execute(
        self,
        command: Command,
        context: CommandContext,
        phases: list[Phase],
    ) -> Any:
        phases.append(Phase.VALIDATING)
        fixed_context = command.validate(context)
        effective = fixed_context if fixed_context is not None else context

        session_config: Any = None
        if context.requires_workspace and context.session is not None and not effective.json:
            phases.append(Phase.SESSION_CONFIG)
            session_config = await context.session.get_config()

        phases.append(Phase.PRE_EXECUTE_MESSAGE)
        if session_config is not None:
            message = command.get_pre_execute_message(session_config)
            if message:
                self.reporter.notice(context, message + "\n")

        phases.append(Phase.SPINNING)
        self.progress_starter(context)

        phases.append(Phase.EXECUTING)
        return await command.execute(effective)

    def _report_error(
        self,
        command: Command,
        context: CommandContext,
        exc: Exception,
        state: InvocationState,
    ) -> ReportableError:
        error = ReportableError.from_exception(exc, status=state.exit_code)
        try:
            return self.reporter.error(command, context, error)
        except Exception as report_exc:  # noqa: BLE001
            logger.error("Failed to report error '%s': %s", error.message, report_exc)
            return error
