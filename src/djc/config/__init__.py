# topmark:header:start
#
#   project      : DJC
#   file         : __init__.py
#   file_relpath : src/djc/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration layer for DJC.

Groups the logging setup, environment-variable readers, the persisted
application config (``config.toml``) and the application state directory.
"""

from __future__ import annotations

from djc.config.app_config import AppConfig, load_app_config
from djc.config.paths import app_dir

__all__: list[str] = [
    "AppConfig",
    "app_dir",
    "load_app_config",
]
