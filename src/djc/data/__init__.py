# topmark:header:start
#
#   project      : DJC
#   file         : __init__.py
#   file_relpath : src/djc/data/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Data-file operations behind the ``djc data`` commands."""

from __future__ import annotations

from djc.data.splitter import FileSplit, SplitSummary, chunk_records, split_plan

__all__: list[str] = [
    "FileSplit",
    "SplitSummary",
    "chunk_records",
    "split_plan",
]
