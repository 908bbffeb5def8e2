# topmark:header:start
#
#   project      : DJC
#   file         : conftest.py
#   file_relpath : tests/data/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers to lay out data plans and data files on disk."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


def records(count: int, start: int = 0) -> list[dict[str, Any]]:
    """Return ``count`` distinct records."""
    return [
        {"attributes": {"type": "Account"}, "Name": f"Acme {i}"} for i in range(start, start + count)
    ]


def write_json(path: Path, data: object) -> Path:
    """Write ``data`` as JSON to ``path`` (creating parents) and return the path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=4) + "\n", encoding="utf-8")
    return path


def read_json(path: Path) -> Any:
    """Return the parsed JSON document at ``path``."""
    return json.loads(path.read_text(encoding="utf-8"))


def make_plan(base: Path, files: dict[str, int], *, name: str = "plan.json") -> Path:
    """Create one data file per entry of ``files`` and a single-entry plan referencing them."""
    for ref, count in files.items():
        write_json(base / ref, {"records": records(count)})
    return write_json(base / name, [{"sobject": "Account", "saveRefs": True, "files": list(files)}])
