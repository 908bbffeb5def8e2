# topmark:header:start
#
#   project      : DJC
#   file         : main.py
#   file_relpath : src/djc/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DJC command-line entry point.

Group-level options (logging, color) are initialized once and placed into
``ctx.obj`` for the topic groups and commands below.
"""

from __future__ import annotations

import click

from djc.cli.commands.data import data_group
from djc.cli.console import ClickConsole
from djc.cli.options import (
    ColorMode,
    common_color_options,
    common_logging_options,
    resolve_color_mode,
)
from djc.config.env import env_requests_json
from djc.config.logging import get_logger, setup_logging
from djc.constants import DJC_VERSION
from djc.core.exit_codes import ExitCode

logger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    loglevel: str | None,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Initialize shared state (logging and color) on the Click context.

    A logging level that cannot be parsed is fatal: the error is printed and
    the process exits with code 1 before any command runs.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        loglevel (str | None): Level from ``--loglevel``, or None to use ``DJC_LOG_LEVEL``.
        color_mode (ColorMode | None): Explicit color mode from ``--color`` (or ``None``).
        no_color (bool): Whether ``--no-color`` was passed; forces color off.
    """
    ctx.ensure_object(dict)

    effective_color_mode = (
        ColorMode.NEVER if no_color else (ColorMode(color_mode) if color_mode else ColorMode.AUTO)
    )
    enable_color = resolve_color_mode(
        cli_mode=effective_color_mode,
        machine_output=env_requests_json(),
    )
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color

    console = ClickConsole(enable_color=enable_color)
    ctx.obj["console"] = console

    try:
        ctx.obj["log_level"] = setup_logging(level=loglevel)
    except ValueError as exc:
        console.error(f"ERROR: {exc}")
        ctx.exit(ExitCode.FAILURE)


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="DJC command-line interface.",
)
@click.version_option(DJC_VERSION, prog_name="djc")
@common_logging_options
@common_color_options
@click.pass_context
def cli(
    ctx: click.Context,
    loglevel: str | None,
    color_mode: ColorMode | None,
    no_color: bool,
) -> None:
    """Entry point for the DJC CLI."""
    init_common_state(ctx, loglevel=loglevel, color_mode=color_mode, no_color=no_color)
    logger.debug("djc %s, log level %s", DJC_VERSION, ctx.obj["log_level"])

    if ctx.invoked_subcommand is None:
        console = ctx.obj["console"]
        console.print("Hint: use 'djc data split --dataplan PLAN' to split large data files.")
        console.print()
        console.print(ctx.get_help())


cli.add_command(data_group)

if __name__ == "__main__":
    cli()
