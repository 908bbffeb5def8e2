# topmark:header:start
#
#   project      : DJC
#   file         : __init__.py
#   file_relpath : src/djc/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DJC package.

DJC is a small data-commands CLI. Every command runs through a shared
invocation pipeline that validates input, reports results in human or
machine-readable form, aggregates daily usage telemetry and controls the
process exit.
"""

from __future__ import annotations
