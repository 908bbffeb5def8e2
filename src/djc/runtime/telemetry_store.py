# topmark:header:start
#
#   project      : DJC
#   file         : telemetry_store.py
#   file_relpath : src/djc/runtime/telemetry_store.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Persistence of telemetry state across invocations.

The default store is a single JSON document keyed by feature name, e.g.::

    {"usage": {"startTime": 1760652000000}}

The file is read and rewritten without locking; DJC assumes one invocation
at a time.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Protocol

from djc.config.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from djc.config.logging import DjcLogger

logger: DjcLogger = get_logger(__name__)


class TelemetryStore(Protocol):
    """Feature-keyed persistence for telemetry state."""

    def load(self, feature: str) -> dict[str, Any]:
        """Return the stored contents for ``feature`` (empty when absent)."""
        ...

    def save(self, feature: str, contents: dict[str, Any]) -> None:
        """Replace the stored contents for ``feature``."""
        ...


class JsonFileTelemetryStore:
    """Telemetry store backed by one JSON document.

    Args:
        path (Path): Location of the JSON document; parent directories are
            created on first save.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"Telemetry state in {self.path} is not a JSON object")
        return data

    def load(self, feature: str) -> dict[str, Any]:
        """Return a copy of the contents stored under ``feature``."""
        contents = self._read_document().get(feature)
        return dict(contents) if isinstance(contents, dict) else {}

    def save(self, feature: str, contents: dict[str, Any]) -> None:
        """Write ``contents`` under ``feature``, keeping other features intact."""
        document = self._read_document()
        document[feature] = dict(contents)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(document, indent=4) + "\n", encoding="utf-8")
        logger.debug("Saved telemetry state '%s' to %s", feature, self.path)
