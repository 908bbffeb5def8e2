# topmark:header:start
#
#   project      : DJC
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the DJC test suite.

Every test runs with the ``DJC_*`` environment cleared and the application
state directory redirected to a per-test temporary directory, so telemetry
and config files never touch the developer's home.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from djc.config import logging
from djc.config.env import EnvVar

if TYPE_CHECKING:
    from pathlib import Path

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type."""

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`."""
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`."""
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def clean_djc_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Clear every ``DJC_*`` variable and isolate the application directory.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture used to manipulate the environment.

    Returns:
        Path: The application state directory used by the test.
    """
    for name in list(os.environ):
        if name.startswith("DJC_"):
            monkeypatch.delenv(name, raising=False)
    home: Path = tmp_path / "djc-home"
    monkeypatch.setenv(EnvVar.HOME, str(home))
    return home


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Log everything down to TRACE while the suite runs."""
    logging.setup_logging(level=logging.TRACE_LEVEL)
