# topmark:header:start
#
#   project      : DJC
#   file         : __init__.py
#   file_relpath : src/djc/runtime/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command execution and observability pipeline.

The [`CommandInvoker`][djc.runtime.invoker.CommandInvoker] composes the
progress indicator, the output reporter, the telemetry aggregator and the
exit controller around a single command execution.
"""

from __future__ import annotations

from djc.runtime.exit import ExitController
from djc.runtime.invoker import CommandInvoker, InvocationOutcome
from djc.runtime.progress import ProgressIndicator
from djc.runtime.reporter import OutputReporter
from djc.runtime.telemetry import TelemetryAggregator, UsageRecord

__all__: list[str] = [
    "CommandInvoker",
    "ExitController",
    "InvocationOutcome",
    "OutputReporter",
    "ProgressIndicator",
    "TelemetryAggregator",
    "UsageRecord",
]
