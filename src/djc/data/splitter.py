# topmark:header:start
#
#   project      : DJC
#   file         : splitter.py
#   file_relpath : src/djc/data/splitter.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Split oversized data files referenced by a data plan.

A data plan is a JSON array of entries, each with an ordered ``files`` list of
data-file paths relative to the plan's directory. A data file is a JSON object
holding a ``records`` list.

Every data file with more than ``MAX_RECORDS_PER_FILE`` records is cut into
contiguous chunks of that size (the last one may be smaller). Each chunk is
written beside its source as ``<stem><offset><suffix>``, where ``offset`` is
the index of the chunk's first record, and the plan entry references the
chunks in order instead of the source. Smaller files are referenced
unchanged. The plan is rewritten in place only when a reference changed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import TYPE_CHECKING, Any

from djc.config.logging import get_logger
from djc.constants import MAX_RECORDS_PER_FILE
from djc.core.errors import MessageKey, build_error

if TYPE_CHECKING:
    from collections.abc import Sequence

    from djc.config.logging import DjcLogger

logger: DjcLogger = get_logger(__name__)

BUNDLE = "data_split"


@dataclass(frozen=True)
class FileSplit:
    """Outcome for one referenced data file.

    Attributes:
        source (str): Reference as found in the plan.
        records (int): Number of records in the source.
        chunks (tuple[str, ...]): References replacing ``source`` in the plan;
            ``(source,)`` when the file was small enough.
    """

    source: str
    records: int
    chunks: tuple[str, ...]

    @property
    def was_split(self) -> bool:
        """True when the source was replaced by chunks."""
        return self.chunks != (self.source,)

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping."""
        return {"source": self.source, "records": self.records, "chunks": list(self.chunks)}


@dataclass(frozen=True)
class SplitSummary:
    """Outcome of splitting one plan."""

    plan: Path
    files: tuple[FileSplit, ...]
    plan_rewritten: bool

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly mapping."""
        return {
            "plan": str(self.plan),
            "planRewritten": self.plan_rewritten,
            "files": [f.to_dict() for f in self.files],
        }


def chunk_records(records: Sequence[Any], size: int = MAX_RECORDS_PER_FILE) -> list[list[Any]]:
    """Partition ``records`` into contiguous chunks of at most ``size`` items."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    return [list(records[i : i + size]) for i in range(0, len(records), size)]


def _pure(ref: str) -> PurePath:
    return PureWindowsPath(ref) if "\\" in ref else PurePosixPath(ref)


def chunk_reference(ref: str, offset: int) -> str:
    """Return the plan reference of the chunk starting at record ``offset``."""
    p = _pure(ref)
    return str(p.with_name(f"{p.stem}{offset}{p.suffix}"))


def _dump(data: object) -> str:
    return json.dumps(data, indent=4) + "\n"


def _load_plan(plan_path: Path) -> list[dict[str, Any]]:
    invalid = MessageKey("dataSplitInvalidPlan", BUNDLE)
    try:
        plan = json.loads(plan_path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise build_error(invalid, [plan_path]) from exc
    if not isinstance(plan, list):
        raise build_error(invalid, [plan_path])
    for entry in plan:
        if not isinstance(entry, dict):
            raise build_error(invalid, [plan_path])
        files = entry.get("files")
        if files is not None and (
            not isinstance(files, list) or not all(isinstance(f, str) for f in files)
        ):
            raise build_error(invalid, [plan_path])
    return plan


def _load_data_file(path: Path, ref: str) -> dict[str, Any]:
    if not path.is_file():
        raise build_error(MessageKey("dataSplitDataFileNotFound", BUNDLE), [ref])
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise build_error(MessageKey("dataSplitInvalidDataFile", BUNDLE), [ref]) from exc
    if not isinstance(data, dict) or not isinstance(data.get("records"), list):
        raise build_error(MessageKey("dataSplitInvalidDataFile", BUNDLE), [ref])
    return data


@dataclass(frozen=True)
class _Chunk:
    """A chunk file waiting to be written."""

    ref: str
    path: Path
    text: str


def _plan_chunks(
    plan_dir: Path,
    ref: str,
    data: dict[str, Any],
    *,
    size: int = MAX_RECORDS_PER_FILE,
) -> tuple[FileSplit, list[_Chunk]]:
    """Work out how one loaded data file is split, without writing anything.

    Args:
        plan_dir (Path): Directory the reference is relative to.
        ref (str): Data-file reference from the plan.
        data (dict[str, Any]): The data file's parsed content.
        size (int): Maximum number of records per file.

    Returns:
        tuple[FileSplit, list[_Chunk]]: The references that replace ``ref`` in
            the plan, and the chunk files to write (empty when not split).
    """
    records: list[Any] = data["records"]
    if len(records) <= size:
        return FileSplit(source=ref, records=len(records), chunks=(ref,)), []

    extra = {k: v for k, v in data.items() if k != "records"}
    chunks: list[_Chunk] = []
    for index, chunk in enumerate(chunk_records(records, size)):
        chunk_ref = chunk_reference(ref, index * size)
        chunks.append(_Chunk(chunk_ref, plan_dir / chunk_ref, _dump({**extra, "records": chunk})))
    split = FileSplit(source=ref, records=len(records), chunks=tuple(c.ref for c in chunks))
    return split, chunks


def _holds(path: Path, text: str) -> bool:
    try:
        return path.read_bytes() == text.encode("utf-8")
    except OSError:
        return False


def _check_chunks(
    source: str,
    chunks: Sequence[_Chunk],
    referenced: set[Path],
    claimed: dict[Path, Path],
    source_path: Path,
) -> None:
    """Reject chunks that would clobber a user file, a plan reference or another chunk.

    An existing file is accepted only when it already holds exactly the
    chunk's content, i.e. it is a chunk left by an earlier split of the same
    source.
    """
    for chunk in chunks:
        target = chunk.path.resolve()
        owner = claimed.get(target)
        if (
            target in referenced
            or (owner is not None and owner != source_path)
            or (target.exists() and not _holds(target, chunk.text))
        ):
            raise build_error(MessageKey("dataSplitChunkConflict", BUNDLE), [source, chunk.ref])
        claimed[target] = source_path


def split_plan(plan_path: Path, *, size: int = MAX_RECORDS_PER_FILE) -> SplitSummary:
    """Split every oversized data file referenced by the plan at ``plan_path``.

    Every referenced data file is loaded and every chunk name checked before
    anything is written, so a failing plan leaves the disk untouched.

    Args:
        plan_path (Path): The data plan.
        size (int): Maximum number of records per file.

    Returns:
        SplitSummary: Per-file outcomes, in plan order.

    Raises:
        ClassifiedError: ``NotFoundError`` when the plan or a data file is
            missing, ``ValidationError`` when either is malformed or a chunk
            would overwrite an unrelated file.
    """
    if not plan_path.exists():
        raise build_error(MessageKey("dataSplitFileNotFound", BUNDLE))

    plan = _load_plan(plan_path)
    plan_dir = plan_path.parent

    loaded: dict[str, dict[str, Any]] = {}
    for entry in plan:
        for ref in entry.get("files") or ():
            if ref not in loaded:
                loaded[ref] = _load_data_file(plan_dir / ref, ref)

    referenced = {(plan_dir / ref).resolve() for ref in loaded}
    claimed: dict[Path, Path] = {}
    splits: dict[str, FileSplit] = {}
    pending: list[_Chunk] = []
    for ref, data in loaded.items():
        split, chunks = _plan_chunks(plan_dir, ref, data, size=size)
        _check_chunks(ref, chunks, referenced, claimed, (plan_dir / ref).resolve())
        splits[ref] = split
        pending.extend(chunks)

    written: set[Path] = set()
    for chunk in pending:
        target = chunk.path.resolve()
        if target in written:
            continue
        chunk.path.write_text(chunk.text, encoding="utf-8")
        written.add(target)
        logger.debug("Wrote %s", chunk.ref)

    outcomes: list[FileSplit] = []
    changed = False
    for entry in plan:
        files: list[str] | None = entry.get("files")
        if files is None:
            continue
        new_files: list[str] = []
        for ref in files:
            split = splits[ref]
            outcomes.append(split)
            new_files.extend(split.chunks)
        if new_files != files:
            entry["files"] = new_files
            changed = True

    for split in splits.values():
        if split.was_split:
            logger.info(
                "Split %s (%d records) into %d file(s)",
                split.source,
                split.records,
                len(split.chunks),
            )

    if changed:
        plan_path.write_text(_dump(plan), encoding="utf-8")
        logger.info("Rewrote data plan %s", plan_path)

    return SplitSummary(plan=plan_path, files=tuple(outcomes), plan_rewritten=changed)
