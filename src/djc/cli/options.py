# topmark:header:start
#
#   project      : DJC
#   file         : options.py
#   file_relpath : src/djc/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Reusable Click options and their resolution logic.

Commands and groups stay thin: logging, color and output-mode switches are
declared here, and command flags are generated from each command's
[`FlagSpec`][djc.core.command.FlagSpec] list.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Callable, ParamSpec, TypeVar

import click

from djc.config.logging import LOG_LEVEL_NAMES

if TYPE_CHECKING:
    from djc.core.command import CommandDescriptor

P = ParamSpec("P")
R = TypeVar("R")


class ColorMode(str, Enum):
    """User intent for colorized terminal output."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"


def resolve_color_mode(
    *,
    cli_mode: ColorMode | None,
    machine_output: bool,
    stdout_isatty: bool | None = None,
) -> bool:
    """Determine whether color output should be enabled.

    Behavior:
        Disables color for machine (JSON) output.
        Honors --color and --no-color CLI flags.
        Honors FORCE_COLOR and NO_COLOR environment variables.
        Defaults to enabling color if stdout is a TTY.
    """
    if machine_output:
        return False
    if cli_mode == ColorMode.ALWAYS:
        return True
    if cli_mode == ColorMode.NEVER:
        return False
    force_color = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        try:
            stdout_isatty = sys.stdout.isatty()
        except (AttributeError, ValueError):
            stdout_isatty = False
    return bool(stdout_isatty)


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--color`` and ``--no-color`` options to a command."""
    f = click.option(
        "--color",
        "color_mode",
        type=click.Choice([m.value for m in ColorMode]),
        default=None,
        help="Color output: auto (default), always, or never.",
    )(f)
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output (equivalent to --color=never).",
    )(f)
    return f


def common_logging_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add the ``--loglevel`` option to a command.

    The value is validated by the logging setup rather than by Click, so an
    unknown level is a fatal start-up error (exit code 1), not a usage error.
    """
    f = click.option(
        "--loglevel",
        "loglevel",
        type=str,
        default=None,
        metavar="LEVEL",
        help=(
            "Logging level for this invocation "
            f"({', '.join(n.lower() for n in LOG_LEVEL_NAMES)}). "
            "Overrides DJC_LOG_LEVEL."
        ),
    )(f)
    return f


def json_output_option(f: Callable[P, R]) -> Callable[P, R]:
    """Add the ``--json`` switch to a command."""
    f = click.option(
        "--json",
        "json_output",
        is_flag=True,
        default=False,
        help="Format output as JSON (same as DJC_CONTENT_TYPE=JSON).",
    )(f)
    return f


def descriptor_flag_options(
    descriptor: CommandDescriptor,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Return a decorator declaring one Click option per descriptor flag.

    Flags with a value become string options; the others become boolean
    switches. Option parameter names equal the flag names with dashes
    replaced by underscores.
    """

    def decorator(f: Callable[P, R]) -> Callable[P, R]:
        # reversed so --help lists flags in declaration order
        for spec in reversed(descriptor.flags):
            decls = [f"--{spec.name}"]
            if spec.short_flag:
                decls.insert(0, f"-{spec.short_flag}")
            decls.append(spec.name.replace("-", "_"))
            if spec.has_value:
                f = click.option(
                    *decls,
                    type=str,
                    required=spec.required,
                    help=spec.description,
                )(f)
            else:
                f = click.option(*decls, is_flag=True, default=False, help=spec.description)(f)
        return f

    return decorator
