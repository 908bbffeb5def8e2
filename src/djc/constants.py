# topmark:header:start
#
#   project      : DJC
#   file         : constants.py
#   file_relpath : src/djc/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DJC Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version
from typing import Final

DJC_VERSION: str = get_version("djc")

APP_NAME: Final[str] = "djc"
NAMESPACE: Final[str] = "djc"

# Files kept in the application state directory:
APP_CONFIG_FILE_NAME: Final[str] = "config.toml"
USAGE_STATE_FILE_NAME: Final[str] = "djc-usage.json"
ANALYTICS_JOURNAL_FILE_NAME: Final[str] = "djc-analytics.jsonl"
USAGE_REPORT_DIR_NAME: Final[str] = "usage"

# Marker file that identifies a DJC workspace root:
WORKSPACE_MARKER_FILE_NAME: Final[str] = "djc-project.json"

# Feature key of the usage telemetry state inside the state document:
USAGE_FEATURE: Final[str] = "usage"

DAY_IN_MILLISECONDS: Final[int] = 1000 * 60 * 60 * 24

# Largest number of records a single data file may hold after splitting:
MAX_RECORDS_PER_FILE: Final[int] = 200

DEFAULT_SPINNER_TITLE: Final[str] = "Processing... %s"
DEFAULT_SPINNER_STRING: Final[str] = "|/-\\"
DEFAULT_SPINNER_DELAY_MS: Final[int] = 60
DEFAULT_LOG_WRITE_WAIT_MS: Final[int] = 1000

VALUE_NOT_SET: str = "n/a"
