# topmark:header:start
#
#   project      : DJC
#   file         : progress.py
#   file_relpath : src/djc/runtime/progress.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Terminal spinner shown while a command executes.

The spinner is a Rich [`Live`][rich.live.Live] display on stderr animating a
[`Spinner`][rich.spinner.Spinner]. It is shown only when the command asks for
progress, ``DJC_SHOW_SPINNER`` is set, and machine output is off.

Optional environment variables:
    - ``DJC_SPINNER_TITLE``: title; ``%s`` marks where the frame is drawn.
    - ``DJC_SPINNER_STRING``: frame characters, or the integer id of a preset.
    - ``DJC_SPINNER_DELAY``: delay between frames in ms (default 60).
    - ``DJC_SPINNER_SKIP_CLEAN``: keep the spinner line when stopping.

Both ``start()`` and ``stop()`` are idempotent, and ``stop()`` is safe on a
spinner that never started.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner
from rich.text import Text

from djc.config.env import EnvVar, env_int, env_is_set, get_env
from djc.config.logging import get_logger
from djc.constants import (
    DEFAULT_SPINNER_DELAY_MS,
    DEFAULT_SPINNER_STRING,
    DEFAULT_SPINNER_TITLE,
)

if TYPE_CHECKING:
    from djc.config.logging import DjcLogger
    from djc.core.context import CommandContext

logger: DjcLogger = get_logger(__name__)

# Rich redraws at most this often; frame timing is driven by the spinner interval.
MAX_REFRESH_PER_SECOND: Final[float] = 50.0


SPINNER_PRESETS: Final[tuple[str, ...]] = (
    "|/-\\",
    "⠂-–—–-",
    "◐◓◑◒",
    "◴◷◶◵",
    "◰◳◲◱",
    "▖▘▝▗",
    "■□▪▫",
    "▌▀▐▄",
    "▉▊▋▌▍▎▏▎▍▌▋▊▉",
    "▁▃▄▅▆▇█▇▆▅▄▃",
    "←↖↑↗→↘↓↙",
    "┤┘┴└├┌┬┐",
    "◢◣◤◥",
    ".oO°Oo.",
    ".oO@*",
    "☱☲☴",
    "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏",
    "⠋⠙⠚⠞⠖⠦⠴⠲⠳⠓",
    "⠄⠆⠇⠋⠙⠸⠰⠠⠰⠸⠙⠋⠇⠆",
    "⠋⠙⠚⠒⠂⠂⠒⠲⠴⠦⠖⠒⠐⠐⠒⠓⠋",
)


def resolve_spinner_frames(value: str | None) -> str:
    """Return the frame characters for ``value``.

    A numeric value selects a preset (falling back to the default on an
    unknown id); any other non-empty value is used verbatim.
    """
    if not value:
        return DEFAULT_SPINNER_STRING
    stripped = value.strip()
    if stripped.isdigit():
        idx = int(stripped)
        if 0 <= idx < len(SPINNER_PRESETS):
            return SPINNER_PRESETS[idx]
        logger.warning("Unknown spinner preset %d; using the default spinner", idx)
        return DEFAULT_SPINNER_STRING
    return value


def progress_enabled(context: CommandContext) -> bool:
    """Return True when a spinner should be shown for ``context``."""
    return context.show_progress and env_is_set(EnvVar.SHOW_SPINNER) and not context.json


class ProgressIndicator:
    """Single-line spinner rendered by a Rich live display.

    Args:
        title (str): Title; ``%s`` is replaced by the current frame.
        frames (str): Frame characters, drawn in sequence.
        delay_ms (int): Delay between frames in milliseconds.
        clean (bool): Erase the spinner line on stop (a transient display).
        console (Console | None): Target console, a stderr console when None.
    """

    def __init__(
        self,
        *,
        title: str = DEFAULT_SPINNER_TITLE,
        frames: str = DEFAULT_SPINNER_STRING,
        delay_ms: int = DEFAULT_SPINNER_DELAY_MS,
        clean: bool = True,
        console: Console | None = None,
    ) -> None:
        self.title = title
        self.frames = frames or DEFAULT_SPINNER_STRING
        self.delay_ms = max(1, delay_ms)
        self.clean = clean
        self.console = console
        self._spinner = Spinner("line")
        self._spinner.frames = list(self.frames)
        self._spinner.interval = float(self.delay_ms)
        self._live: Live | None = None
        self._console: Console | None = None

    @classmethod
    def from_env(cls) -> ProgressIndicator:
        """Build a spinner configured from the ``DJC_SPINNER_*`` variables."""
        return cls(
            title=get_env(EnvVar.SPINNER_TITLE) or DEFAULT_SPINNER_TITLE,
            frames=resolve_spinner_frames(get_env(EnvVar.SPINNER_STRING)),
            delay_ms=env_int(EnvVar.SPINNER_DELAY) or DEFAULT_SPINNER_DELAY_MS,
            clean=not env_is_set(EnvVar.SPINNER_SKIP_CLEAN),
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_spinning(self) -> bool:
        """True while the live display is running."""
        return self._live is not None

    def start(self) -> None:
        """Start the live display (idempotent)."""
        if self._live is not None:
            return
        console = self.console or Console(stderr=True)
        self._console = console
        live = Live(
            console=console,
            transient=self.clean,
            refresh_per_second=min(MAX_REFRESH_PER_SECOND, 1000 / self.delay_ms),
            redirect_stdout=False,
            redirect_stderr=False,
            get_renderable=self._renderable,
        )
        live.start()
        self._live = live

    def stop(self) -> None:
        """Stop the live display (idempotent)."""
        if self._live is None:
            return
        live, self._live = self._live, None
        live.stop()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def render(self, frame: str) -> str:
        """Return the spinner line for ``frame``."""
        if "%s" in self.title:
            return self.title.replace("%s", frame)
        return f"{self.title} {frame}"

    def _renderable(self) -> Text:
        now = self._console.get_time() if self._console is not None else 0.0
        frame = self._spinner.render(now)
        return Text(self.render(str(frame)))


def start_progress(context: CommandContext) -> ProgressIndicator | None:
    """Start a spinner for ``context`` when enabled and store it on the context."""
    if not progress_enabled(context):
        return None
    spinner = ProgressIndicator.from_env()
    context.spinner = spinner
    spinner.start()
    return spinner


def stop_progress(context: CommandContext) -> None:
    """Stop and detach the context's spinner, if any. Never raises."""
    spinner = context.spinner
    if spinner is None:
        return
    try:
        spinner.stop()
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to stop the progress indicator: %s", exc)
    finally:
        context.spinner = None
