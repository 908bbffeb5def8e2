# topmark:header:start
#
#   project      : DJC
#   file         : console.py
#   file_relpath : src/djc/cli/console.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-backed console for user-facing program output.

Program output (results, errors, notices) goes through this console; internal
diagnostics go through `logging`.
"""

from __future__ import annotations

import sys
from typing import Any, TextIO

import click

from djc.core.console_api import ConsoleLike


class ClickConsole(ConsoleLike):
    """Program-output console, independent from the logger.

    Args:
        enable_color (bool): If True, enables ANSI color codes in the output.
        out (TextIO | None): Stream for standard output. Defaults to `sys.stdout`.
        err (TextIO | None): Stream for error output. Defaults to `sys.stderr`.
    """

    enable_color: bool
    out: TextIO | None
    err: TextIO | None

    def __init__(
        self,
        *,
        enable_color: bool = True,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.enable_color = enable_color
        self.out = out
        self.err = err

    def print(self, text: str = "", *, nl: bool = True) -> None:
        """Write a message to stdout."""
        click.echo(text, nl=nl, file=self.out or sys.stdout, color=self.enable_color)

    def warn(self, text: str, *, nl: bool = True) -> None:
        """Write a warning message to stderr."""
        click.secho(
            text, nl=nl, file=self.err or sys.stderr, color=self.enable_color, fg="yellow"
        )

    def error(self, text: str, *, nl: bool = True) -> None:
        """Write an error message to stderr."""
        click.secho(
            text, nl=nl, file=self.err or sys.stderr, color=self.enable_color, fg="bright_red"
        )

    def styled(self, text: str, **style_kwargs: Any) -> str:
        """Return ``text`` styled with click.style, or unchanged when color is off."""
        if not self.enable_color:
            return text
        return click.style(text, **style_kwargs)
