# topmark:header:start
#
#   project      : DJC
#   file         : errors.py
#   file_relpath : src/djc/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Classified errors for DJC commands.

Usage:
    Build errors with [`build_error`][djc.core.errors.build_error] from a
    message-catalog key so the message text, the optional remediation action
    and the taxonomy name stay consistent::

        raise build_error(MessageKey("dataSplitFileNotFound", "data_split"))

Reporting:
    The command invoker turns any exception into a
    [`ReportableError`][djc.core.errors.ReportableError] before handing it to
    the output reporter. Exceptions that are not classified are reported as
    ``GenericExecutionError``.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final, NamedTuple

from djc.core.exit_codes import ExitCode
from djc.core.messages import require_message


class ErrorKind(str, Enum):
    """Error taxonomy.

    Members:
      VALIDATION: Pre-execute contract violation.
      NOT_FOUND: A referenced input is missing.
      SESSION_EXPIRED: The session is no longer valid; carries a remediation action.
      GENERIC_EXECUTION: Anything else raised by a command.
    """

    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFoundError"
    SESSION_EXPIRED = "SessionExpiredError"
    GENERIC_EXECUTION = "GenericExecutionError"

    @classmethod
    def from_name(cls, name: str | None) -> ErrorKind:
        """Return the kind whose value is ``name``, or GENERIC_EXECUTION."""
        for kind in cls:
            if kind.value == name:
                return kind
        return cls.GENERIC_EXECUTION


class MessageKey(NamedTuple):
    """Composite catalog key naming a label inside a specific bundle."""

    key_name: str
    bundle: str = "default"


# Error names keyed by catalog label; unmapped labels use the label itself
ERROR_NAMES: Final[dict[str, str]] = {
    "dataSplitFileNotFound": ErrorKind.NOT_FOUND.value,
    "dataSplitDataFileNotFound": ErrorKind.NOT_FOUND.value,
    "dataSplitMissingPlan": ErrorKind.VALIDATION.value,
    "dataSplitInvalidPlan": ErrorKind.VALIDATION.value,
    "dataSplitInvalidDataFile": ErrorKind.VALIDATION.value,
    "dataSplitChunkConflict": ErrorKind.VALIDATION.value,
    "invalidProjectWorkspace": ErrorKind.VALIDATION.value,
}


@dataclass(frozen=True)
class TabularPayload:
    """Rows and column keys an error wants rendered as a table."""

    columns: Sequence[str]
    rows: Sequence[Mapping[str, Any]]


class ClassifiedError(Exception):
    """An error carrying a taxonomy name and an optional remediation action.

    Attributes:
        message (str): Human-readable message.
        name (str): Taxonomy name (see [`ErrorKind`][djc.core.errors.ErrorKind]);
            may also be a catalog label that has no mapping.
        action (str | None): Optional remediation hint.
        tabular (TabularPayload | None): Optional rows/columns describing the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        name: str = ErrorKind.GENERIC_EXECUTION.value,
        action: str | None = None,
        tabular: TabularPayload | None = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.name: str = name
        self.action: str | None = action
        self.tabular: TabularPayload | None = tabular

    @property
    def kind(self) -> ErrorKind:
        """The taxonomy kind derived from ``name``."""
        return ErrorKind.from_name(self.name)


def _resolve(key: str | MessageKey, tokens: Sequence[object] | None) -> str:
    if isinstance(key, MessageKey):
        return require_message(key.key_name, tokens, key.bundle)
    return require_message(key, tokens)


def build_error(
    error_key: str | MessageKey,
    error_tokens: Sequence[object] | None = None,
    action_key: str | MessageKey | None = None,
    action_tokens: Sequence[object] | None = None,
) -> ClassifiedError:
    """Build a classified error from catalog keys.

    Args:
        error_key (str | MessageKey): Label of the message (default bundle when a plain str).
        error_tokens (Sequence[object] | None): Tokens for the message.
        action_key (str | MessageKey | None): Optional label of the remediation action.
        action_tokens (Sequence[object] | None): Tokens for the action.

    Returns:
        ClassifiedError: The error; its name is looked up in ``ERROR_NAMES`` and
            defaults to the raw key name.
    """
    message = _resolve(error_key, error_tokens)
    action = _resolve(action_key, action_tokens) if action_key is not None else None
    key_name = error_key.key_name if isinstance(error_key, MessageKey) else error_key
    return ClassifiedError(message, name=ERROR_NAMES.get(key_name, key_name), action=action)


@dataclass(frozen=True)
class ReportableError:
    """Normalized error handed to the output reporter.

    Attributes:
        kind (ErrorKind): Taxonomy kind.
        name (str): Taxonomy name as exposed in machine output.
        message (str): Message text.
        status (int): Exit status reported alongside the error.
        stack (str | None): Formatted traceback, when available.
        action (str | None): Optional remediation hint.
        tabular (TabularPayload | None): Optional rows/columns payload.
    """

    kind: ErrorKind
    name: str
    message: str
    status: int = ExitCode.FAILURE
    stack: str | None = None
    action: str | None = None
    tabular: TabularPayload | None = field(default=None)

    @classmethod
    def from_exception(cls, exc: BaseException, *, status: int | None = None) -> ReportableError:
        """Normalize any exception into a ReportableError."""
        stack: str | None = None
        if exc.__traceback__ is not None:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

        effective_status = int(status) if status is not None else int(ExitCode.FAILURE)
        if isinstance(exc, ClassifiedError):
            return cls(
                kind=exc.kind,
                name=exc.name,
                message=exc.message,
                status=effective_status,
                stack=stack,
                action=exc.action,
                tabular=exc.tabular,
            )
        return cls(
            kind=ErrorKind.GENERIC_EXECUTION,
            name=type(exc).__name__,
            message=str(exc) or type(exc).__name__,
            status=effective_status,
            stack=stack,
        )

    def to_dict(self) -> dict[str, object]:
        """Return the machine-readable error payload.

        ``message`` holds the tabular rows when present, the text otherwise.
        """
        payload: dict[str, object] = {
            "message": list(self.tabular.rows) if self.tabular is not None else self.message,
            "status": self.status,
            "stack": self.stack,
            "name": self.name,
        }
        if self.action is not None:
            payload["action"] = self.action
        return payload
