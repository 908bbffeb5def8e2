# topmark:header:start
#
#   project      : DJC
#   file         : data.py
#   file_relpath : src/djc/cli/commands/data.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DJC `data` topic.

Groups the data-file commands. Invoked without a subcommand, it prints the
topic description followed by its help.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from djc.cli.commands.data_split import data_split_command
from djc.core.messages import require_message

if TYPE_CHECKING:
    from djc.core.console_api import ConsoleLike

TOPIC_BUNDLE = "data"


@click.group(
    name=require_message("name", bundle=TOPIC_BUNDLE),
    invoke_without_command=True,
    help=require_message("mainTopicLongDescriptionHelp", bundle=TOPIC_BUNDLE),
    short_help=require_message("mainTopicDescriptionHelp", bundle=TOPIC_BUNDLE),
)
@click.pass_context
def data_group(ctx: click.Context) -> None:
    """Utility for manipulating data."""
    if ctx.invoked_subcommand is not None:
        return
    ctx.ensure_object(dict)
    console: ConsoleLike = ctx.obj["console"]
    console.print(require_message("mainTopicDescriptionHelp", bundle=TOPIC_BUNDLE))
    console.print()
    console.print(ctx.get_help())


data_group.add_command(data_split_command)
