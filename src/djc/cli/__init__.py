# topmark:header:start
#
#   project      : DJC
#   file         : __init__.py
#   file_relpath : src/djc/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DJC CLI package.

Click command definitions and the plumbing that hands each command to the
[`CommandInvoker`][djc.runtime.invoker.CommandInvoker].

Typical usage:
    The console script entry point is defined in ``pyproject.toml`` as::

        [project.scripts]
        djc = "djc.cli.main:cli"

Subcommands live in [`djc.cli.commands`][].
"""

from __future__ import annotations

__all__: list[str] = []
# Do NOT import .main or commands at module import time
