# topmark:header:start
#
#   project      : DJC
#   file         : test_progress.py
#   file_relpath : tests/runtime/test_progress.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the progress indicator and its enablement rules."""

from __future__ import annotations

import asyncio
import io
import time

import pytest
from rich.console import Console

from djc.config.env import EnvVar
from djc.constants import DEFAULT_SPINNER_STRING
from djc.core.context import CommandContext
from djc.runtime.progress import (
    SPINNER_PRESETS,
    ProgressIndicator,
    progress_enabled,
    resolve_spinner_frames,
    start_progress,
    stop_progress,
)
from tests.conftest import parametrize


@parametrize(
    "show_progress, env_set, json_mode, expected",
    [
        (True, True, False, True),
        (False, True, False, False),
        (True, False, False, False),
        (True, True, True, False),
    ],
)
def test_progress_enabled_rules(
    monkeypatch: pytest.MonkeyPatch,
    show_progress: bool,
    env_set: bool,
    json_mode: bool,
    expected: bool,
) -> None:
    if env_set:
        monkeypatch.setenv(EnvVar.SHOW_SPINNER, "1")
    context = CommandContext(show_progress=show_progress, json=json_mode)

    assert progress_enabled(context) is expected


def test_spinner_frames_from_preset_or_literal() -> None:
    assert resolve_spinner_frames(None) == DEFAULT_SPINNER_STRING
    assert resolve_spinner_frames("2") == SPINNER_PRESETS[2]
    assert resolve_spinner_frames("999") == DEFAULT_SPINNER_STRING
    assert resolve_spinner_frames("ab") == "ab"


def test_from_env_reads_spinner_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(EnvVar.SPINNER_TITLE, "Working %s")
    monkeypatch.setenv(EnvVar.SPINNER_STRING, "xy")
    monkeypatch.setenv(EnvVar.SPINNER_DELAY, "5")
    monkeypatch.setenv(EnvVar.SPINNER_SKIP_CLEAN, "1")

    spinner = ProgressIndicator.from_env()

    assert spinner.render("x") == "Working x"
    assert spinner.frames == "xy"
    assert spinner.delay_ms == 5
    assert spinner.clean is False


def test_render_without_placeholder_appends_frame() -> None:
    assert ProgressIndicator(title="Busy").render("|") == "Busy |"


def _console(stream: io.StringIO, *, terminal: bool = False) -> Console:
    return Console(file=stream, force_terminal=terminal, width=40)


def test_stop_before_start_is_a_no_op() -> None:
    stream = io.StringIO()
    spinner = ProgressIndicator(console=_console(stream))
    spinner.stop()
    spinner.stop()

    assert stream.getvalue() == ""
    assert not spinner.is_spinning


def test_spinner_start_and_stop_are_idempotent() -> None:
    stream = io.StringIO()
    spinner = ProgressIndicator(
        title="T %s", frames="ab", delay_ms=5, clean=False, console=_console(stream)
    )

    spinner.start()
    spinner.start()
    assert spinner.is_spinning
    time.sleep(0.05)
    spinner.stop()
    spinner.stop()

    assert not spinner.is_spinning
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    assert len(lines) == 1
    assert lines[0].strip() in {"T a", "T b"}


def test_clean_spinner_leaves_nothing_behind() -> None:
    stream = io.StringIO()
    spinner = ProgressIndicator(title="T %s", frames="ab", delay_ms=5, console=_console(stream))

    spinner.start()
    time.sleep(0.02)
    spinner.stop()

    assert stream.getvalue() == ""


def test_spinner_animates_on_a_terminal() -> None:
    stream = io.StringIO()
    spinner = ProgressIndicator(
        title="Busy %s",
        frames="xy",
        delay_ms=1000,
        clean=False,
        console=_console(stream, terminal=True),
    )

    spinner.start()
    time.sleep(0.05)
    spinner.stop()

    assert "Busy x" in stream.getvalue()


def test_start_and_stop_progress_manage_the_context(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(EnvVar.SHOW_SPINNER, "1")
    context = CommandContext(show_progress=True)

    async def scenario() -> None:
        spinner = start_progress(context)
        assert spinner is not None
        assert context.spinner is spinner
        stop_progress(context)
        assert context.spinner is None
        assert not spinner.is_spinning
        stop_progress(context)

    asyncio.run(scenario())


def test_start_progress_is_skipped_when_disabled() -> None:
    context = CommandContext(show_progress=True)

    assert start_progress(context) is None
    assert context.spinner is None


def test_stop_progress_never_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    spinner = ProgressIndicator()

    def _broken() -> None:
        raise RuntimeError("terminal gone")

    monkeypatch.setattr(spinner, "stop", _broken)
    context = CommandContext(spinner=spinner)

    stop_progress(context)

    assert context.spinner is None
