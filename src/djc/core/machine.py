# topmark:header:start
#
#   project      : DJC
#   file         : machine.py
#   file_relpath : src/djc/core/machine.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Shared machine-output envelope conventions for DJC.

This module defines the canonical keys used in DJC's machine-readable (JSON)
output and the normalization applied to command results before they are
serialized. It is intentionally Click/console-free so it can be reused by any
frontend.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Final, cast


class MachineKey:
    """Canonical keys used in machine-readable JSON output envelopes."""

    STATUS: Final[str] = "status"
    RESULT: Final[str] = "result"

    # error envelope
    MESSAGE: Final[str] = "message"
    NAME: Final[str] = "name"
    STACK: Final[str] = "stack"
    ACTION: Final[str] = "action"


def normalize_payload(obj: object) -> object:
    """Normalize a machine-output payload into JSON-serializable structures.

    Conversions:
      - Path -> str
      - Enum -> Enum.value
      - object with callable .to_dict() -> normalize(.to_dict())
      - dataclass instance -> normalize(asdict(obj))
      - Mapping -> dict[str, normalized value]
      - list/tuple/set/frozenset -> list[normalized item]

    Args:
        obj (object): The machine-output payload to be transformed into JSON-serializable format.

    Returns:
        object: The JSON-serializable representation of machine-output payload.
    """
    if isinstance(obj, Path):
        return str(obj)

    if isinstance(obj, Enum):
        return obj.value

    to_dict: Any | None = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return normalize_payload(to_dict())

    if is_dataclass(obj) and not isinstance(obj, type):
        return normalize_payload(asdict(obj))

    if isinstance(obj, Mapping):
        mapping: Mapping[object, Any] = cast("Mapping[object, Any]", obj)
        return {str(k): normalize_payload(v) for k, v in mapping.items()}

    if isinstance(obj, (list, tuple, set, frozenset)):
        seq: Iterable[object] = cast("Iterable[object]", obj)
        return [normalize_payload(v) for v in seq]

    return obj


def build_success_envelope(result: object, *, status: int) -> dict[str, object]:
    """Return the ``{status, result}`` envelope for a successful command."""
    return {MachineKey.STATUS: status, MachineKey.RESULT: normalize_payload(result)}


def dumps_envelope(envelope: Mapping[str, object]) -> str:
    """Serialize an envelope the way DJC prints it (2-space indent, str fallback)."""
    return json.dumps(normalize_payload(envelope), indent=2, default=str)
