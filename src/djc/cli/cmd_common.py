# topmark:header:start
#
#   project      : DJC
#   file         : cmd_common.py
#   file_relpath : src/djc/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common command plumbing for Click-based commands.

The helpers here run the outer pre-filter around every command (output mode,
workspace check) and hand the command to the
[`CommandInvoker`][djc.runtime.invoker.CommandInvoker]. They hold no command
policy of their own.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import click

from djc.cli.console import ClickConsole
from djc.config.env import env_requests_json
from djc.config.logging import get_logger
from djc.config.paths import find_workspace_root
from djc.constants import WORKSPACE_MARKER_FILE_NAME
from djc.core.context import CommandContext, InvocationState
from djc.core.errors import ClassifiedError, ReportableError, build_error
from djc.core.exit_codes import ExitCode
from djc.runtime.exit import ExitController
from djc.runtime.invoker import CommandInvoker
from djc.runtime.reporter import OutputReporter
from djc.runtime.telemetry import default_telemetry

if TYPE_CHECKING:
    from djc.config.logging import DjcLogger
    from djc.core.command import Command, CommandDescriptor
    from djc.core.console_api import ConsoleLike

logger: DjcLogger = get_logger(__name__)


def get_console_safely() -> ConsoleLike:
    """Return the console stored on the active Click context, or a plain one."""
    ctx = click.get_current_context(silent=True)
    if ctx is not None and isinstance(getattr(ctx, "obj", None), dict) and "console" in ctx.obj:
        console: ConsoleLike = ctx.obj["console"]
        return console
    return ClickConsole(enable_color=False)


def build_invoker(console: ConsoleLike) -> CommandInvoker:
    """Compose the production invoker around ``console``."""
    return CommandInvoker(
        OutputReporter(console),
        default_telemetry(),
        ExitController(),
    )


def validate_workspace(start: Path) -> Path:
    """Return the workspace root containing ``start``.

    Raises:
        ClassifiedError: ``ValidationError`` when no workspace marker is found.
    """
    root = find_workspace_root(start)
    if root is None:
        raise build_error("invalidProjectWorkspace", [WORKSPACE_MARKER_FILE_NAME])
    return root


def run_command(
    ctx: click.Context,
    command: Command,
    descriptor: CommandDescriptor,
    flags: dict[str, Any],
    *,
    json_output: bool = False,
) -> NoReturn:
    """Run ``command`` through the pre-filter and the invoker, then exit.

    A prepared invoker may be supplied via ``ctx.obj["invoker"]``; the
    outcome of the invocation is stored in ``ctx.obj["outcome"]``.

    With a hard exit the process terminates inside the invoker. With a soft
    exit control returns here and the Click context exits with the pending
    exit code.
    """
    ctx.ensure_object(dict)
    state = InvocationState()
    context = CommandContext(
        flags=flags,
        json=json_output or env_requests_json(),
        show_progress=descriptor.show_progress,
        command_name=descriptor.command_id,
        requires_workspace=descriptor.requires_workspace,
    )

    invoker: CommandInvoker | None = ctx.obj.get("invoker")
    if invoker is None:
        console = ClickConsole(enable_color=False) if context.json else get_console_safely()
        invoker = build_invoker(console)

    if descriptor.requires_workspace:
        try:
            root = validate_workspace(Path.cwd())
        except ClassifiedError as exc:
            invoker.reporter.error(None, context, ReportableError.from_exception(exc))
            ctx.exit(ExitCode.FAILURE)
        logger.debug("Using workspace %s", root)

    outcome = asyncio.run(invoker.invoke(command, context, state))
    ctx.obj["outcome"] = outcome
    ctx.exit(outcome.exit_code)
