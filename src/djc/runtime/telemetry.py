# topmark:header:start
#
#   project      : DJC
#   file         : telemetry.py
#   file_relpath : src/djc/runtime/telemetry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Daily usage telemetry.

After every invocation the aggregator:

1. logs the elapsed time of the command;
2. loads the persisted window start (``startTime``), initializing it to
   today's day boundary on first use;
3. once a full day has passed since ``startTime``, aggregates every recorded
   execution per ``(command, version)``, submits the records to the usage
   sink, moves ``startTime`` to the current day boundary and clears the
   analytics source;
4. records the current execution for the next window, even when the flush
   failed.

Telemetry is best-effort: the flush runs as a separate task whose failures
are logged at DEBUG and otherwise discarded.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from datetime import datetime, time
from typing import TYPE_CHECKING, Any

from djc.config.env import EnvVar, get_env
from djc.config.logging import get_logger
from djc.config.paths import analytics_journal_path, usage_report_dir, usage_state_path
from djc.constants import DAY_IN_MILLISECONDS, DJC_VERSION, USAGE_FEATURE
from djc.runtime.analytics import ExecutionJournal, ReportDirectorySink, SubprocessAnalyticsSource
from djc.runtime.telemetry_store import JsonFileTelemetryStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from djc.config.logging import DjcLogger
    from djc.core.context import InvocationState
    from djc.core.errors import ReportableError
    from djc.runtime.analytics import AnalyticsSource, UsageSink
    from djc.runtime.telemetry_store import TelemetryStore

logger: DjcLogger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(value + 0.5))


def day_boundary(moment: datetime) -> datetime:
    """Return local midnight of the day holding ``moment``."""
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def to_epoch_ms(moment: datetime) -> int:
    """Return ``moment`` as integer epoch milliseconds."""
    return int(round(moment.timestamp() * 1000))


@dataclass
class UsageRecord:
    """Aggregated usage of one command version over one window.

    Attributes:
        command_key (str): ``"<command>-<version>"``.
        command_name (str): Fully qualified command name.
        version (str): Tool version, plus the plugin version when recorded.
        usage_date (str): ``YYYYMMDD`` of the window start.
        total_executions (int): Number of executions.
        total_errors (int): Number of executions with a non-zero status.
        avg_runtime (int): Running average runtime in ms.
        min_runtime (float): Shortest runtime in ms.
        max_runtime (float): Longest runtime in ms.
    """

    command_key: str
    command_name: str
    version: str
    usage_date: str
    total_executions: int = 0
    total_errors: int = 0
    avg_runtime: int = 0
    min_runtime: float = 0
    max_runtime: float = 0

    def add_sample(self, runtime: float, *, failed: bool = False) -> None:
        """Fold one execution into the aggregate.

        The average is updated from the previous count before the count is
        incremented: ``avg' = round((runtime + avg * n) / (n + 1))``.
        """
        if failed:
            self.total_errors += 1

        n = self.total_executions
        self.avg_runtime = round_half_up((runtime + self.avg_runtime * n) / (n + 1))
        self.total_executions += 1

        if runtime > self.max_runtime:
            self.max_runtime = runtime
        elif runtime < self.min_runtime:
            self.min_runtime = runtime


def version_key(entry: dict[str, Any]) -> str:
    """Return the version label of an execution entry."""
    version = f"{entry.get('version')}"
    plugin_version = entry.get("plugin_version")
    if plugin_version:
        version = f"{version} {plugin_version}"
    return version


def aggregate_usage(executions: Iterable[dict[str, Any]], *, usage_date: str) -> list[UsageRecord]:
    """Aggregate execution entries into one record per ``(command, version)``.

    Args:
        executions (Iterable[dict[str, Any]]): Entries with ``command``,
            ``version``, ``runtime`` and ``status``.
        usage_date (str): ``YYYYMMDD`` label stored on every record.

    Returns:
        list[UsageRecord]: Records in order of first appearance.
    """
    usages: dict[str, UsageRecord] = {}
    for entry in executions:
        version = version_key(entry)
        command_key = f"{entry.get('command')}-{version}"
        runtime = entry.get("runtime", 0)
        if not isinstance(runtime, (int, float)):
            runtime = float(runtime)

        record = usages.get(command_key)
        if record is None:
            record = UsageRecord(
                command_key=command_key,
                command_name=str(entry.get("command")),
                version=version,
                usage_date=usage_date,
                min_runtime=runtime,
                max_runtime=runtime,
            )
            usages[command_key] = record

        record.add_sample(runtime, failed=entry.get("status", 0) != 0)
    return list(usages.values())


class TelemetryAggregator:
    """Accumulate and periodically flush daily usage statistics.

    Args:
        store (TelemetryStore): Persistence of the window start.
        source (AnalyticsSource): Recorded executions.
        sink (UsageSink): Receiver of aggregated records.
        version (str): Version recorded for the current execution.
        clock (Callable[[], datetime]): Current local time.
    """

    def __init__(
        self,
        store: TelemetryStore,
        source: AnalyticsSource,
        sink: UsageSink,
        *,
        version: str = DJC_VERSION,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.source = source
        self.sink = sink
        self.version = version
        self.clock = clock

    async def record_completion(
        self,
        command_name: str,
        state: InvocationState,
        error: ReportableError | None = None,
    ) -> None:
        """Record the end of an invocation; never raises.

        Args:
            command_name (str): Fully qualified command name.
            state (InvocationState): Invocation bookkeeping (start timestamp).
            error (ReportableError | None): The reported error, on failure.
        """
        task = asyncio.create_task(
            asyncio.to_thread(self._complete, command_name, state, error is not None)
        )
        try:
            await task
        except Exception as exc:  # noqa: BLE001
            logger.debug("Usage telemetry failed for '%s': %s", command_name, exc)

    def _complete(self, command_name: str, state: InvocationState, failed: bool) -> None:
        elapsed_ms = state.elapsed_ms()
        logger.info("DONE! Completed '%s' in %ss", command_name, elapsed_ms / 1000.0)
        try:
            self.flush_if_due()
        finally:
            self.source.record(
                {
                    "command": command_name,
                    "version": self.version,
                    "runtime": elapsed_ms,
                    "status": 1 if failed else 0,
                }
            )

    def flush_if_due(self) -> bool:
        """Flush the previous window when a day has passed.

        Returns:
            bool: True when usage was submitted and the window was reset.
        """
        now = self.clock()
        start_of_day = to_epoch_ms(day_boundary(now))

        contents = self.store.load(USAGE_FEATURE)
        if not contents.get("startTime"):
            contents["startTime"] = start_of_day
            self.store.save(USAGE_FEATURE, contents)

        window_start = int(contents["startTime"])
        if to_epoch_ms(now) - window_start < DAY_IN_MILLISECONDS:
            return False

        usage_date = datetime.fromtimestamp(window_start / 1000, tz=now.tzinfo).strftime("%Y%m%d")
        records = aggregate_usage(self.source.fetch(), usage_date=usage_date)
        self.sink.submit(records)

        contents["startTime"] = start_of_day
        self.store.save(USAGE_FEATURE, contents)
        self.source.clear()
        logger.debug("Flushed %d usage record(s) for %s", len(records), usage_date)
        return True


def default_telemetry() -> TelemetryAggregator:
    """Build the aggregator wired to the application state directory."""
    analytics_cmd = get_env(EnvVar.ANALYTICS_CMD)
    source: AnalyticsSource = (
        SubprocessAnalyticsSource(analytics_cmd)
        if analytics_cmd
        else ExecutionJournal(analytics_journal_path())
    )
    return TelemetryAggregator(
        JsonFileTelemetryStore(usage_state_path()),
        source,
        ReportDirectorySink(usage_report_dir()),
    )
