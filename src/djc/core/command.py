# topmark:header:start
#
#   project      : DJC
#   file         : command.py
#   file_relpath : src/djc/core/command.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Command contract consumed by the command invoker.

A command is any object implementing [`Command`][djc.core.command.Command].
Only ``execute`` is required; the other hooks customize validation and
reporting. [`BaseCommand`][djc.core.command.BaseCommand] provides neutral
defaults for all hooks and derives the [`RenderResult`][djc.core.command.RenderResult]
used for human output from them.

Render variants:
    - `Empty`: nothing to show (prints a "no results" message).
    - `RowSet`: a single table.
    - `TableSet`: several named tables (each a `RowSet` or an `Empty`).
    - `Message`: a plain text message (skipped when empty).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Union

from djc.constants import NAMESPACE

if TYPE_CHECKING:
    from djc.core.context import CommandContext
    from djc.core.errors import ReportableError


# --- Descriptors ---


@dataclass(frozen=True)
class FlagSpec:
    """Declarative description of a command flag.

    Attributes:
        name (str): Long flag name (``--<name>``) and key in ``context.flags``.
        short_flag (str | None): Optional one-letter alias (``-<short_flag>``).
        description (str): Help text.
        has_value (bool): True when the flag takes a value, False for a boolean switch.
        required (bool): True when the flag must be provided.
    """

    name: str
    short_flag: str | None = None
    description: str = ""
    has_value: bool = False
    required: bool = False


@dataclass(frozen=True)
class CommandDescriptor:
    """Static metadata of a command: naming, help, workspace and flag needs."""

    name: str
    topic: str
    description: str
    help_text: str = ""
    requires_workspace: bool = False
    show_progress: bool = False
    flags: tuple[FlagSpec, ...] = ()

    @property
    def command_id(self) -> str:
        """Fully qualified command name, e.g. ``djc:data:split``."""
        return f"{NAMESPACE}:{self.topic}:{self.name}"


# --- Render variants ---


@dataclass(frozen=True)
class Column:
    """A table column: the row key to read and the header label to print."""

    key: str
    label: str

    @classmethod
    def coerce(cls, value: Column | str) -> Column:
        """Accept either a Column or a bare key (used as its own label)."""
        return value if isinstance(value, Column) else cls(key=value, label=value)


@dataclass(frozen=True)
class Empty:
    """No rows to show; ``message`` overrides the default "no results" text."""

    message: str | None = None


@dataclass(frozen=True)
class RowSet:
    """A single table, optionally headed by ``title``."""

    columns: tuple[Column, ...]
    rows: tuple[Mapping[str, Any], ...]
    title: str | None = None


@dataclass(frozen=True)
class TableSet:
    """Several named tables rendered in order."""

    tables: Mapping[str, RowSet | Empty] = field(default_factory=dict)


@dataclass(frozen=True)
class Message:
    """A plain text message."""

    text: str


RenderResult = Union[Empty, RowSet, TableSet, Message]

ColumnData = Union[Sequence[Union[Column, str]], Mapping[str, Sequence[Union[Column, str]]]]


# --- Contract ---


class Command(Protocol):
    """Capability set of a command run by the invoker."""

    async def execute(self, context: CommandContext) -> Any:
        """Run the business operation and return its result."""
        ...

    def validate(self, context: CommandContext) -> CommandContext | None:
        """Check preconditions; may return an adjusted context. Raise to fail."""
        ...

    def get_pre_execute_message(self, session_config: Any) -> str | None:
        """Message printed once the session config is known, before executing."""
        ...

    def get_human_error_message(self, error: ReportableError) -> str | None:
        """Override the error text shown to humans."""
        ...

    def render_result(self, result: Any) -> RenderResult:
        """Choose how a successful result is shown to humans."""
        ...


def _is_empty_collection(value: object) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 0


def _as_rows(value: object) -> tuple[Mapping[str, Any], ...]:
    if value is None:
        return ()
    if isinstance(value, Mapping):
        return (value,)
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return ({"value": value},)


def _lookup(result: object, key: str) -> object:
    if isinstance(result, Mapping):
        return result.get(key)
    return getattr(result, key, None)


class BaseCommand:
    """Neutral implementation of every optional hook.

    Subclasses implement ``execute`` and override the hooks they need.
    """

    descriptor: CommandDescriptor | None = None

    async def execute(self, context: CommandContext) -> Any:
        """Run the business operation and return its result."""
        raise NotImplementedError

    def validate(self, context: CommandContext) -> CommandContext | None:
        """Check preconditions; the default accepts any context."""
        return None

    def get_pre_execute_message(self, session_config: Any) -> str | None:
        """No pre-execute message by default."""
        return None

    def get_human_success_message(self, result: Any) -> str | None:
        """No success message by default."""
        return None

    def get_human_error_message(self, error: ReportableError) -> str | None:
        """Keep the error's own message by default."""
        return None

    def get_column_data(self) -> ColumnData | None:
        """No tabular output by default."""
        return None

    def get_empty_result_message(self, table_name: str) -> str | None:
        """Use the default "no results" message for empty tables."""
        return None

    def render_result(self, result: Any) -> RenderResult:
        """Derive the render variant from the hooks.

        Rules:
          - an empty list/tuple result renders as `Empty`;
          - column data keyed by table name renders a `TableSet`, each table
            being `Empty` (with the per-table message) when it has no rows;
          - flat column data renders the whole result as a `RowSet`;
          - otherwise the human success message, if any, is shown.
        """
        if _is_empty_collection(result):
            return Empty()

        column_data = self.get_column_data()
        if isinstance(column_data, Mapping):
            tables: dict[str, RowSet | Empty] = {}
            for table_name, columns in column_data.items():
                rows = _as_rows(_lookup(result, table_name))
                if rows:
                    tables[table_name] = RowSet(
                        columns=tuple(Column.coerce(c) for c in columns),
                        rows=rows,
                    )
                else:
                    tables[table_name] = Empty(self.get_empty_result_message(table_name))
            return TableSet(tables)
        if column_data is not None:
            return RowSet(
                columns=tuple(Column.coerce(c) for c in column_data),
                rows=_as_rows(result),
            )

        return Message(self.get_human_success_message(result) or "")
