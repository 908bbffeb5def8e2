# topmark:header:start
#
#   project      : DJC
#   file         : exit.py
#   file_relpath : src/djc/runtime/exit.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Process-exit control.

The exit decision is taken exactly once per invocation:

- **Soft exit** (test harnesses, embedding): nothing is terminated; the caller
  gets control back and reads the pending exit code from the invocation state.
- **Hard exit**: the process terminates with the pending exit code. When the
  log level lets anything below ERROR through, termination waits
  ``DJC_LOG_WRITE_WAIT`` ms (default 1000) so pending log output can flush.

Soft-exit precedence: explicit ``context.soft_exit`` > ``DJC_SOFT_EXIT`` >
``soft_exit`` in ``config.toml``. Unset everywhere means hard exit.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

from djc.config.app_config import AppConfig, load_app_config
from djc.config.env import EnvVar, env_bool, env_int, get_env
from djc.config.logging import get_logger, is_error_level
from djc.constants import DEFAULT_LOG_WRITE_WAIT_MS
from djc.core.exit_codes import ExitCode

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from djc.config.logging import DjcLogger
    from djc.core.context import CommandContext, InvocationState

logger: DjcLogger = get_logger(__name__)


def _env_soft_exit() -> bool | None:
    raw = get_env(EnvVar.SOFT_EXIT)
    if not raw:
        return None
    parsed = env_bool(EnvVar.SOFT_EXIT)
    # any other non-empty value counts as set
    return True if parsed is None else parsed


class ExitController:
    """Decide between soft and hard process termination.

    Args:
        terminate (Callable[[int], object]): Terminates the process with a code.
        sleep (Callable[[float], Awaitable[object]]): Async sleep used for the flush delay.
        app_config_loader (Callable[[], AppConfig]): Loads the persisted application config.
        error_level (Callable[[], bool]): True when logging is at ERROR level or quieter.
    """

    def __init__(
        self,
        *,
        terminate: Callable[[int], object] = sys.exit,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        app_config_loader: Callable[[], AppConfig] = load_app_config,
        error_level: Callable[[], bool] = is_error_level,
    ) -> None:
        self.terminate = terminate
        self.sleep = sleep
        self.app_config_loader = app_config_loader
        self.error_level = error_level

    def resolve_soft_exit(self, context: CommandContext, app_config: AppConfig) -> bool:
        """Return True when the invocation must not terminate the process."""
        if context.soft_exit is not None:
            return context.soft_exit
        from_env = _env_soft_exit()
        if from_env is not None:
            return from_env
        return bool(app_config.soft_exit)

    @staticmethod
    def flush_wait_ms(app_config: AppConfig) -> int:
        """Return the hard-exit flush delay in milliseconds."""
        from_env = env_int(EnvVar.LOG_WRITE_WAIT)
        if from_env is not None and from_env >= 0:
            return from_env
        if app_config.log_write_wait is not None:
            return app_config.log_write_wait
        return DEFAULT_LOG_WRITE_WAIT_MS

    async def exit(self, context: CommandContext, state: InvocationState) -> None:
        """Take the exit decision for the invocation described by ``state``."""
        state.exit_calls += 1
        code = int(state.exit_code if state.exit_code is not None else ExitCode.SUCCESS)

        app_config = self.app_config_loader()
        if self.resolve_soft_exit(context, app_config):
            logger.debug("Soft exit; pending exit code %d", code)
            return

        if not self.error_level():
            wait_ms = self.flush_wait_ms(app_config)
            logger.debug("Waiting %d ms for logs to flush before exiting", wait_ms)
            await self.sleep(wait_ms / 1000)
        self.terminate(code)
