# topmark:header:start
#
#   project      : DJC
#   file         : data_split.py
#   file_relpath : src/djc/cli/commands/data_split.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DJC `data split` command.

Splits every data file referenced by a data plan that holds more than 200
records into chunks of at most 200 records, and rewrites the plan to
reference the chunks.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import click

from djc.cli.cmd_common import run_command
from djc.cli.options import descriptor_flag_options, json_output_option
from djc.core.command import (
    BaseCommand,
    Column,
    CommandDescriptor,
    Empty,
    FlagSpec,
    RowSet,
)
from djc.core.errors import MessageKey, build_error
from djc.core.messages import require_message
from djc.data.splitter import split_plan

if TYPE_CHECKING:
    from djc.core.command import RenderResult
    from djc.core.context import CommandContext
    from djc.data.splitter import SplitSummary

BUNDLE = "data_split"

DATA_SPLIT_DESCRIPTOR = CommandDescriptor(
    name="split",
    topic="data",
    description=require_message("description", bundle=BUNDLE),
    help_text=require_message("longDescription", bundle=BUNDLE),
    requires_workspace=False,
    show_progress=True,
    flags=(
        FlagSpec(
            name="dataplan",
            short_flag="f",
            description=require_message("flagDataplanDescription", bundle=BUNDLE),
            has_value=True,
            required=True,
        ),
    ),
)

SPLIT_COLUMNS: tuple[Column, ...] = (
    Column("source", "Source"),
    Column("records", "Records"),
    Column("files", "Files"),
)


class DataSplitCommand(BaseCommand):
    """Split the oversized data files of a data plan."""

    descriptor = DATA_SPLIT_DESCRIPTOR

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir = base_dir

    def plan_path(self, context: CommandContext) -> Path:
        """Return the plan path, resolved against the working directory."""
        base = self.base_dir or Path.cwd()
        return (base / str(context.flags["dataplan"])).resolve()

    def validate(self, context: CommandContext) -> CommandContext | None:
        if not context.flags.get("dataplan"):
            raise build_error(MessageKey("dataSplitMissingPlan", BUNDLE))
        return None

    async def execute(self, context: CommandContext) -> SplitSummary:
        return await asyncio.to_thread(split_plan, self.plan_path(context))

    def render_result(self, result: SplitSummary) -> RenderResult:
        if not result.files:
            return Empty(require_message("dataSplitNoFiles", bundle=BUNDLE))
        rows = tuple(
            {
                "source": f.source,
                "records": f.records,
                "files": ", ".join(f.chunks) if f.was_split else "(unchanged)",
            }
            for f in result.files
        )
        return RowSet(
            columns=SPLIT_COLUMNS,
            rows=rows,
            title=require_message("filesSplit", bundle=BUNDLE) + ".",
        )


@click.command(
    name=DATA_SPLIT_DESCRIPTOR.name,
    help=DATA_SPLIT_DESCRIPTOR.help_text,
    short_help=DATA_SPLIT_DESCRIPTOR.description,
)
@descriptor_flag_options(DATA_SPLIT_DESCRIPTOR)
@json_output_option
@click.pass_context
def data_split_command(ctx: click.Context, dataplan: str, json_output: bool) -> None:
    """Split large data files into smaller ones."""
    run_command(
        ctx,
        DataSplitCommand(),
        DATA_SPLIT_DESCRIPTOR,
        {"dataplan": dataplan},
        json_output=json_output,
    )
