# topmark:header:start
#
#   project      : DJC
#   file         : env.py
#   file_relpath : src/djc/config/env.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Environment variables recognized by DJC and small typed readers for them.

This module has no imports from the rest of DJC so it can be used by the
logging setup itself.
"""

from __future__ import annotations

import os
from typing import Final


class EnvVar:
    """Canonical names of the environment variables read by DJC."""

    SHOW_SPINNER: Final[str] = "DJC_SHOW_SPINNER"
    SPINNER_TITLE: Final[str] = "DJC_SPINNER_TITLE"
    SPINNER_STRING: Final[str] = "DJC_SPINNER_STRING"
    SPINNER_DELAY: Final[str] = "DJC_SPINNER_DELAY"
    SPINNER_SKIP_CLEAN: Final[str] = "DJC_SPINNER_SKIP_CLEAN"

    CONTENT_TYPE: Final[str] = "DJC_CONTENT_TYPE"

    LOG_LEVEL: Final[str] = "DJC_LOG_LEVEL"
    LOG_WRITE_WAIT: Final[str] = "DJC_LOG_WRITE_WAIT"

    SOFT_EXIT: Final[str] = "DJC_SOFT_EXIT"

    HOME: Final[str] = "DJC_HOME"
    ANALYTICS_CMD: Final[str] = "DJC_ANALYTICS_CMD"


_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


def get_env(name: str) -> str | None:
    """Return the raw value of ``name``, or None when unset."""
    return os.environ.get(name)


def env_is_set(name: str) -> bool:
    """Return True when ``name`` is set to a non-empty value."""
    return bool(os.environ.get(name))


def env_bool(name: str) -> bool | None:
    """Return a tri-state boolean read from ``name``.

    Returns:
        bool | None: True/False for recognized values, None when unset or unrecognized.
    """
    val = os.environ.get(name)
    if val is None:
        return None
    v = val.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    return None


def env_int(name: str) -> int | None:
    """Return ``name`` parsed as an integer, or None when unset or not a number."""
    val = os.environ.get(name)
    if val is None:
        return None
    try:
        return int(val.strip())
    except ValueError:
        return None


def env_requests_json() -> bool:
    """Return True when the environment asks for machine-readable (JSON) output."""
    val = os.environ.get(EnvVar.CONTENT_TYPE)
    return val is not None and val.strip().upper() == "JSON"
