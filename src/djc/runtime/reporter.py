# topmark:header:start
#
#   project      : DJC
#   file         : reporter.py
#   file_relpath : src/djc/runtime/reporter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Render command results and errors for humans or machines.

Machine mode (``--json`` or ``DJC_CONTENT_TYPE=JSON``):
    - success: ``{"status": <int>, "result": <normalized result>}`` on stdout;
    - error: ``{"message", "status", "stack", "name"[, "action"]}`` on stderr.

Human mode renders the command's [`RenderResult`][djc.core.command.RenderResult]
on stdout, and errors on stderr. Every human error is additionally logged at
DEBUG with its full structured payload.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final

from djc.config.env import env_requests_json
from djc.config.logging import get_logger
from djc.core.command import Empty, Message, RowSet, TableSet
from djc.core.errors import ErrorKind
from djc.core.machine import build_success_envelope, dumps_envelope
from djc.core.messages import require_message

if TYPE_CHECKING:
    from djc.config.logging import DjcLogger
    from djc.core.command import Command, RenderResult
    from djc.core.console_api import ConsoleLike
    from djc.core.context import CommandContext
    from djc.core.errors import ReportableError

logger: DjcLogger = get_logger(__name__)

# Message fragments that reveal an invalid session for token-based sessions
SESSION_EXPIRED_PATTERNS: Final[tuple[str, ...]] = (
    "Session expired or invalid",
    "Destination URL not reset",
)


def is_machine_mode(context: CommandContext) -> bool:
    """Return True when ``context`` asks for machine-readable output."""
    return context.json or env_requests_json()


def ensure_period(message: str) -> str:
    """Return ``message`` terminated by a period."""
    return message if message.endswith(".") else message + "."


def render_table(
    columns: Sequence[tuple[str, str]],
    rows: Sequence[Mapping[str, Any]],
) -> str:
    """Render rows as a padded plain-text table.

    Args:
        columns (Sequence[tuple[str, str]]): ``(key, label)`` pairs in display order.
        rows (Sequence[Mapping[str, Any]]): Rows keyed by column key.

    Returns:
        str: Header line, separator line and one line per row (no trailing newline).
    """
    if not columns:
        return ""

    def _cell(row: Mapping[str, Any], key: str) -> str:
        value = row.get(key)
        return "" if value is None else str(value)

    cells = [[_cell(r, key) for key, _label in columns] for r in rows]
    widths = [len(label) for _key, label in columns]
    for line in cells:
        for i, cell in enumerate(line):
            widths[i] = max(widths[i], len(cell))

    def _line(values: Sequence[str]) -> str:
        return "  ".join(f"{v:<{widths[i]}}" for i, v in enumerate(values)).rstrip()

    out = [
        _line([label for _key, label in columns]),
        _line(["─" * w for w in widths]),
    ]
    out.extend(_line(line) for line in cells)
    return "\n".join(out)


class OutputReporter:
    """Report the single outcome of a command invocation.

    Args:
        console (ConsoleLike): Program-output console.
    """

    def __init__(self, console: ConsoleLike) -> None:
        self.console = console

    # ------------------------------------------------------------------
    # Success
    # ------------------------------------------------------------------

    def success(
        self,
        command: Command,
        context: CommandContext,
        result: Any,
        *,
        status: int = 0,
    ) -> None:
        """Report a successful result."""
        if is_machine_mode(context):
            self.console.print(dumps_envelope(build_success_envelope(result, status=status)))
            return
        self.render(command.render_result(result))

    def render(self, rendered: RenderResult) -> None:
        """Print a render variant for humans."""
        if isinstance(rendered, Empty):
            self.console.print(rendered.message or require_message("noResultsFound"))
        elif isinstance(rendered, RowSet):
            self._print_rowset(rendered)
        elif isinstance(rendered, TableSet):
            for table in rendered.tables.values():
                if isinstance(table, Empty):
                    self.console.print(table.message or require_message("noResultsFound"))
                else:
                    self._print_rowset(table)
                    # separate tables by a blank line
                    self.console.print()
        elif isinstance(rendered, Message):
            if rendered.text:
                self.console.print(rendered.text)

    def _print_rowset(self, rowset: RowSet) -> None:
        if rowset.title:
            self.console.print(self.console.styled(rowset.title, bold=True))
        self.console.print(
            render_table([(c.key, c.label) for c in rowset.columns], rowset.rows)
        )

    def notice(self, context: CommandContext, text: str) -> None:
        """Print an informational line in human mode only."""
        if not is_machine_mode(context):
            self.console.print(text)

    # ------------------------------------------------------------------
    # Error
    # ------------------------------------------------------------------

    def error(
        self,
        command: Command | None,
        context: CommandContext,
        err: ReportableError,
    ) -> ReportableError:
        """Report an error and return it as reported (remediation attached).

        Args:
            command (Command | None): The failing command; None for failures
                outside any command (pre-filter).
            context (CommandContext): Invocation context.
            err (ReportableError): Normalized error.

        Returns:
            ReportableError: The error as reported.
        """
        err = self._attach_session_action(context, err)
        payload = err.to_dict()

        if is_machine_mode(context):
            self.console.error(dumps_envelope(payload))
            return err

        message = err.message
        if command is not None:
            human = command.get_human_error_message(err)
            if human:
                message = human
        message = ensure_period(message)

        if err.tabular is not None and err.tabular.rows and err.tabular.columns:
            self.console.error(
                render_table([(c, c) for c in err.tabular.columns], err.tabular.rows)
            )
        elif err.action is not None:
            self.console.error(f"ERROR: {message}")
            self.console.warn(f"Try this: {err.action}")
        else:
            self.console.error(f"ERROR: {message}")

        logger.debug("Reported error: %s", dumps_envelope(payload))
        return err

    @staticmethod
    def _attach_session_action(context: CommandContext, err: ReportableError) -> ReportableError:
        if err.action is not None:
            return err
        if not any(p in err.message for p in SESSION_EXPIRED_PATTERNS):
            return err
        session = context.session
        if session is None or not session.using_access_token:
            return err
        return dataclasses.replace(
            err,
            kind=ErrorKind.SESSION_EXPIRED,
            action=require_message("invalidInstanceUrlForAccessTokenAction"),
        )
