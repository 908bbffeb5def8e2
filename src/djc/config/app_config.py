# topmark:header:start
#
#   project      : DJC
#   file         : app_config.py
#   file_relpath : src/djc/config/app_config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Load the persisted DJC application config.

The config is a small TOML document (``config.toml`` in the application
directory). Parsing is done with `tomlkit`; unreadable or malformed files are
logged and treated as empty so that config problems never block a command.

Example ``config.toml``::

    soft_exit = true
    log_write_wait = 250
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final, cast

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from djc.config.logging import get_logger
from djc.config.paths import app_config_path

if TYPE_CHECKING:
    from pathlib import Path

    from djc.config.logging import DjcLogger

logger: DjcLogger = get_logger(__name__)


class AppConfigKey:
    """Keys recognized in ``config.toml``."""

    SOFT_EXIT: Final[str] = "soft_exit"
    LOG_WRITE_WAIT: Final[str] = "log_write_wait"


@dataclass(frozen=True)
class AppConfig:
    """Immutable view of the persisted application config.

    Attributes:
        soft_exit (bool | None): Suppress process termination when True; None when unset.
        log_write_wait (int | None): Hard-exit flush delay in milliseconds; None when unset.
    """

    soft_exit: bool | None = None
    log_write_wait: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Build an AppConfig from a parsed TOML table, ignoring ill-typed values."""
        soft_exit = data.get(AppConfigKey.SOFT_EXIT)
        if not isinstance(soft_exit, bool):
            if soft_exit is not None:
                logger.warning("Ignoring non-boolean '%s': %r", AppConfigKey.SOFT_EXIT, soft_exit)
            soft_exit = None

        wait = data.get(AppConfigKey.LOG_WRITE_WAIT)
        if isinstance(wait, bool) or not isinstance(wait, int) or wait < 0:
            if wait is not None:
                logger.warning(
                    "Ignoring invalid '%s': %r", AppConfigKey.LOG_WRITE_WAIT, wait
                )
            wait = None

        return cls(soft_exit=soft_exit, log_write_wait=wait)


def load_toml_dict(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file from the filesystem.

    Args:
        path (Path): Path to the TOML document.

    Returns:
        dict[str, Any]: The parsed TOML content, or an empty dict when the
            file is missing or cannot be parsed.
    """
    if not path.exists():
        logger.debug("No application config at %s", path)
        return {}
    try:
        text: str = path.read_text(encoding="utf-8")
        doc: tomlkit.TOMLDocument = tomlkit.parse(text)
        data_any: Any = doc.unwrap()
        return cast("dict[str, Any]", data_any) if isinstance(data_any, dict) else {}
    except OSError as e:
        logger.error("Error loading TOML from %s: %s", path, e)
        return {}
    except UnicodeDecodeError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}
    except TomlkitParseError as e:
        logger.error("Error decoding TOML from %s: %s", path, e)
        return {}
    except Exception as e:  # noqa: BLE001
        logger.error("Unknown error while reading TOML from %s: %s", path, e)
        return {}


def load_app_config(path: Path | None = None) -> AppConfig:
    """Return the application config stored at ``path`` (default location if None)."""
    return AppConfig.from_dict(load_toml_dict(path or app_config_path()))
