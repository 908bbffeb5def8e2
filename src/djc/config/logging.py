# topmark:header:start
#
#   project      : DJC
#   file         : logging.py
#   file_relpath : src/djc/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Custom DJC logging with TRACE logging.

This module extends the standard logging module with DJC-specific features,
including a custom TRACE level, a specialized logger class, and colored output formatting.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

from djc.config.env import EnvVar, get_env

if TYPE_CHECKING:
    from collections.abc import Mapping

# Define TRACE_LEVEL as a module-level constant
TRACE_LEVEL: Final[int] = logging.DEBUG - 5

# Level used when neither the CLI nor the environment set one
DEFAULT_LOG_LEVEL: Final[int] = logging.ERROR

LOG_LEVEL_NAMES: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


class DjcLogger(logging.Logger):
    """Custom logger class for DJC with support for a TRACE log level below DEBUG."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'.

        Args:
            msg (object): The message to be logged.
            *args (object): Variable length argument list for the message.
            extra (Mapping[str, object] | None): Optional dictionary of extra information to pass
                to the logger.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(
                TRACE_LEVEL,
                msg=msg,
                args=args,
                extra=extra,
                stacklevel=2,
            )


if not hasattr(logging, "TRACE"):
    logging.addLevelName(TRACE_LEVEL, "TRACE")
    # Expose TRACE_LEVEL as logging.TRACE
    logging.TRACE = TRACE_LEVEL  # type: ignore

logging.setLoggerClass(DjcLogger)


LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"


class ChalkFormatter(logging.Formatter):
    """Formatter that outputs log records with chalk-colored formatting based on severity level."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the specified record with colors based on log level.

        Args:
            record (logging.LogRecord): The LogRecord to be formatted.

        Returns:
            str: The colorized formatted log message as a string.
        """
        level = record.levelno
        message = super().format(record)

        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        if level >= logging.DEBUG:
            return chalk.gray(message)
        if level >= TRACE_LEVEL:
            return chalk.blue(message)
        return chalk.dim.red(message)


def parse_log_level(value: str | int) -> int:
    """Translate a level name or number into a logging level.

    Args:
        value (str | int): A level name (``"DEBUG"``, ``"trace"``...) or number.

    Returns:
        int: The numeric logging level.

    Raises:
        ValueError: If the value is not a known level name or a non-negative number.
    """
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Invalid log level: {value}")
        return value
    v = value.strip().upper()
    if v.isdigit():
        return int(v)
    if v not in LOG_LEVEL_NAMES:
        raise ValueError(
            f"Invalid log level '{value}' - valid choices: {', '.join(LOG_LEVEL_NAMES)}"
        )
    return LOG_LEVEL_NAMES[v]


def resolve_env_log_level() -> int | None:
    """Return a logging level from environment or None if unset or invalid.

    Honors DJC_LOG_LEVEL (e.g., "TRACE", "DEBUG", "INFO", numeric "10").
    """
    val = get_env(EnvVar.LOG_LEVEL)
    if not val:
        return None
    try:
        return parse_log_level(val)
    except ValueError:
        return None


def setup_logging(level: str | int | None = None) -> int:
    """Configure the root logger with a specified log level and colored output.

    If ``level`` is None, environment variables are consulted via
    [`resolve_env_log_level`][djc.config.logging.resolve_env_log_level].
    Default is ERROR when unspecified.

    Args:
        level (str | int | None): Level name or number, or None to use the environment.

    Returns:
        int: The effective numeric level.

    Raises:
        ValueError: If an explicit ``level`` cannot be parsed.
    """
    if level is None:
        resolved: int = resolve_env_log_level() or DEFAULT_LOG_LEVEL
    else:
        resolved = parse_log_level(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)

    # Remove all existing handlers to prevent duplicate log messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Records go to stderr; stdout is reserved for program (and machine) output
    handler = logging.StreamHandler(sys.stderr)
    formatter = ChalkFormatter(LOG_FORMAT if resolved >= logging.INFO else DEBUG_LOG_FORMAT)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    root_logger.propagate = False
    return resolved


def is_error_level() -> bool:
    """Return True when the root logger only lets errors (or worse) through."""
    return logging.getLogger().getEffectiveLevel() >= logging.ERROR


def get_logger(name: str) -> DjcLogger:
    """Retrieve a DjcLogger instance with the specified name.

    Args:
        name (str): The name of the logger.

    Returns:
        DjcLogger: A DjcLogger instance.
    """
    logger = logging.getLogger(name)
    return cast("DjcLogger", logger)
