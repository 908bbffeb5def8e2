# topmark:header:start
#
#   project      : DJC
#   file         : paths.py
#   file_relpath : src/djc/config/paths.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Locations of the files DJC keeps between invocations.

All of them live in the application state directory, which is ``DJC_HOME``
when set and Click's per-user application directory otherwise.
"""

from __future__ import annotations

from pathlib import Path

import click

from djc.config.env import EnvVar, get_env
from djc.constants import (
    ANALYTICS_JOURNAL_FILE_NAME,
    APP_CONFIG_FILE_NAME,
    APP_NAME,
    USAGE_REPORT_DIR_NAME,
    USAGE_STATE_FILE_NAME,
    WORKSPACE_MARKER_FILE_NAME,
)


def app_dir() -> Path:
    """Return the application state directory (not created here)."""
    override = get_env(EnvVar.HOME)
    if override:
        return Path(override).expanduser()
    return Path(click.get_app_dir(APP_NAME))


def app_config_path() -> Path:
    """Return the path of the persisted application config."""
    return app_dir() / APP_CONFIG_FILE_NAME


def usage_state_path() -> Path:
    """Return the path of the telemetry state document."""
    return app_dir() / USAGE_STATE_FILE_NAME


def analytics_journal_path() -> Path:
    """Return the path of the local execution journal."""
    return app_dir() / ANALYTICS_JOURNAL_FILE_NAME


def usage_report_dir() -> Path:
    """Return the directory receiving daily usage reports."""
    return app_dir() / USAGE_REPORT_DIR_NAME


def find_workspace_root(start: Path) -> Path | None:
    """Return the closest directory at or above ``start`` holding a workspace marker."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        if (candidate / WORKSPACE_MARKER_FILE_NAME).is_file():
            return candidate
    return None
