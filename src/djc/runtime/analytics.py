# topmark:header:start
#
#   project      : DJC
#   file         : analytics.py
#   file_relpath : src/djc/runtime/analytics.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Sources of recorded command executions and sinks for usage reports.

An execution entry is a JSON object::

    {"command": "djc:data:split", "version": "0.3.0", "runtime": 812, "status": 0}

with an optional ``plugin_version``. Sources:

- [`ExecutionJournal`][djc.runtime.analytics.ExecutionJournal]: local JSON-lines
  file appended to after every invocation (the default).
- [`SubprocessAnalyticsSource`][djc.runtime.analytics.SubprocessAnalyticsSource]:
  an external executable answering ``<exe> analytics`` with
  ``{"commands": [...]}`` and cleared with ``<exe> analytics:clear``.

Sinks receive the aggregated [`UsageRecord`][djc.runtime.telemetry.UsageRecord]
set once per day.
"""

from __future__ import annotations

import json
import subprocess
from typing import TYPE_CHECKING, Any, Protocol

from djc.config.logging import get_logger
from djc.core.machine import normalize_payload

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from djc.config.logging import DjcLogger
    from djc.runtime.telemetry import UsageRecord

logger: DjcLogger = get_logger(__name__)


class AnalyticsSource(Protocol):
    """Feed of command executions recorded since the last flush."""

    def record(self, entry: dict[str, Any]) -> None:
        """Record one completed execution."""
        ...

    def fetch(self) -> list[dict[str, Any]]:
        """Return all executions recorded since the last clear."""
        ...

    def clear(self) -> None:
        """Forget all recorded executions."""
        ...


class UsageSink(Protocol):
    """Destination of aggregated daily usage."""

    def submit(self, records: Sequence[UsageRecord]) -> None:
        """Submit one aggregation window worth of usage records."""
        ...


class ExecutionJournal:
    """Append-only JSON-lines journal of executions.

    Args:
        path (Path): Journal file; created on first record.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def record(self, entry: dict[str, Any]) -> None:
        """Append ``entry`` as one JSON line."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(entry, sort_keys=True) + "\n")

    def fetch(self) -> list[dict[str, Any]]:
        """Return the journal entries, skipping lines that are not JSON objects."""
        if not self.path.exists():
            return []
        entries: list[dict[str, Any]] = []
        for lineno, line in enumerate(self.path.read_text(encoding="utf-8").splitlines(), 1):
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except ValueError:
                logger.debug("Skipping malformed journal line %d in %s", lineno, self.path)
                continue
            if isinstance(entry, dict):
                entries.append(entry)
        return entries

    def clear(self) -> None:
        """Delete the journal file."""
        self.path.unlink(missing_ok=True)


class SubprocessAnalyticsSource:
    """Executions recorded by an external analytics tool.

    Args:
        executable (str): Program answering ``analytics`` and ``analytics:clear``.
    """

    def __init__(self, executable: str) -> None:
        self.executable = executable

    def record(self, entry: dict[str, Any]) -> None:
        """No-op: the external tool records executions itself."""

    def fetch(self) -> list[dict[str, Any]]:
        """Return the tool's ``commands`` list; empty on failure or bad output."""
        proc = subprocess.run(
            [self.executable, "analytics"],
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )
        if proc.returncode == 1:
            logger.debug("'%s analytics' exited with status 1", self.executable)
            return []
        try:
            commands = json.loads(proc.stdout)["commands"]
        except (ValueError, KeyError, TypeError):
            logger.debug("Unparsable output from '%s analytics'", self.executable)
            return []
        return [c for c in commands if isinstance(c, dict)] if isinstance(commands, list) else []

    def clear(self) -> None:
        """Ask the tool to forget its recorded executions."""
        subprocess.run(
            [self.executable, "analytics:clear"],
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )


class ReportDirectorySink:
    """Write each day's usage records to ``usage-YYYYMMDD.json`` in a directory.

    Args:
        directory (Path): Report directory; created on first submit.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def submit(self, records: Sequence[UsageRecord]) -> None:
        """Write ``records``; nothing is written for an empty window."""
        if not records:
            logger.debug("No usage to report")
            return
        usage_date = records[0].usage_date
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / f"usage-{usage_date}.json"
        target.write_text(
            json.dumps(normalize_payload(list(records)), indent=4) + "\n",
            encoding="utf-8",
        )
        logger.info("Wrote %d usage record(s) to %s", len(records), target)
