# topmark:header:start
#
#   project      : DJC
#   file         : context.py
#   file_relpath : src/djc/core/context.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-invocation state threaded through the command pipeline.

- [`CommandContext`][djc.core.context.CommandContext] carries the parsed flags,
  the optional session and the output-mode switches a command sees.
- [`InvocationState`][djc.core.context.InvocationState] carries the bookkeeping
  owned by the pipeline itself: the start timestamp, the pending exit code and
  the number of exit decisions taken.

Both are created when an invocation starts and discarded when it ends.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from djc.constants import VALUE_NOT_SET

if TYPE_CHECKING:
    from djc.runtime.progress import ProgressIndicator


class Session(Protocol):
    """External session handle a command may operate against."""

    name: str
    using_access_token: bool

    async def get_config(self) -> Any:
        """Fetch the session configuration."""
        ...


@dataclass
class CommandContext:
    """Mutable per-invocation parameter bag.

    Attributes:
        flags (dict[str, Any]): Parsed command flags keyed by flag name.
        session (Session | None): Optional external session.
        json (bool): Emit machine-readable output instead of human text.
        show_progress (bool): The command wants a progress indicator.
        soft_exit (bool | None): Explicit soft-exit override (highest precedence).
        command_name (str | None): Fully qualified name, used for logging and telemetry.
        requires_workspace (bool): The command needs the session configuration.
        spinner (ProgressIndicator | None): Live progress indicator, owned by
            the progress indicator itself.
        invocation (InvocationState | None): Bookkeeping of the running
            invocation; a command may set ``invocation.exit_code`` to override
            the success exit code.
    """

    flags: dict[str, Any] = field(default_factory=dict)
    session: Session | None = None
    json: bool = False
    show_progress: bool = False
    soft_exit: bool | None = None
    command_name: str | None = None
    requires_workspace: bool = False
    spinner: ProgressIndicator | None = None
    invocation: InvocationState | None = None

    def flags_as_json(self) -> str:
        """Return the flags serialized for log output."""
        return json.dumps(self.flags, default=str, sort_keys=True)

    def session_name(self) -> str:
        """Return the session name for log output."""
        return self.session.name if self.session is not None else VALUE_NOT_SET


@dataclass
class InvocationState:
    """Pipeline-owned bookkeeping for one invocation.

    Attributes:
        started_at (float): ``time.monotonic()`` when the invocation began.
        exit_code (int | None): Pending process exit code; None until decided.
        exit_calls (int): Number of exit decisions taken (must end at 1).
    """

    started_at: float = field(default_factory=time.monotonic)
    exit_code: int | None = None
    exit_calls: int = 0

    def elapsed_ms(self) -> int:
        """Milliseconds since ``started_at``."""
        return int(round((time.monotonic() - self.started_at) * 1000))
