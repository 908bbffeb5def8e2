# topmark:header:start
#
#   project      : DJC
#   file         : noxfile.py
#   file_relpath : noxfile.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DJC project automation via Nox.

Sessions:
  - `qa`: Per-Python session that runs pytest and pyright.
  - `property_test`: Long-running property tests (opt-in).
  - `lint`: Ruff lint.
  - `lint_fixall`: Ruff lint autofix.
  - `format_check`: Verify formatting (ruff).
  - `format`: Apply formatting (ruff).
  - `package_check`: Build sdist/wheel and validate metadata (twine).

Common invocations:
  - `nox -s lint`
  - `nox -s qa` (runs for all configured Python versions)
"""

from __future__ import annotations

import pathlib
import sys
import tomllib
import warnings
from typing import Any, cast

import nox

CURRENT_PYTHON_VERSION: str = f"{sys.version_info[0]}.{sys.version_info[1]}"


def _parse_pyproject_toml() -> dict[str, Any]:
    """Parse `pyproject.toml`; return an empty table when missing or invalid.

    This runs at **noxfile import time**, so it must not depend on project
    runtime dependencies.
    """
    path: pathlib.Path = pathlib.Path(__file__).parent / "pyproject.toml"
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError:
        return {}


def get_supported_pythons() -> list[str]:
    """Resolve supported Python versions from `pyproject.toml` classifiers.

    Returns:
        list[str]: Supported versions like ["3.11", "3.12", ...], sorted.
    """
    project_any = _parse_pyproject_toml().get("project")
    classifiers_any = project_any.get("classifiers") if isinstance(project_any, dict) else None
    if not isinstance(classifiers_any, list):
        warnings.warn(
            "Could not find 'classifiers' in pyproject.toml. "
            f"Falling back to Python {CURRENT_PYTHON_VERSION}.",
            RuntimeWarning,
            stacklevel=2,
        )
        return [CURRENT_PYTHON_VERSION]

    prefix = "Programming Language :: Python :: "
    versions: set[tuple[int, int]] = set()
    for c in cast("list[str]", classifiers_any):
        if not c.startswith(prefix):
            continue
        parts: list[str] = c.removeprefix(prefix).strip().split(".")
        # Accept only X.Y numeric versions.
        if len(parts) == 2 and all(p.isdigit() for p in parts):
            versions.add((int(parts[0]), int(parts[1])))

    if not versions:
        return [CURRENT_PYTHON_VERSION]
    return [f"{major}.{minor}" for major, minor in sorted(versions)]


PYTHONS: list[str] = get_supported_pythons()

nox.options.sessions = ["lint", "qa"]
nox.options.reuse_existing_virtualenvs = True


@nox.session(python=PYTHONS)
def qa(session: nox.Session) -> None:
    """Run the test suite (without the slow property tests) and pyright."""
    session.install("-e", ".[test]")
    session.install("pyright")
    session.run("pytest", "-q", "tests", "-m", "not hypothesis_slow", *session.posargs)

    py_ver: str = session.python if isinstance(session.python, str) else CURRENT_PYTHON_VERSION
    session.run("pyright", "--pythonversion", py_ver)


@nox.session
def property_test(session: nox.Session) -> None:
    """Run the long-running property tests."""
    session.install("-e", ".[test]")
    session.run("pytest", "-vv", "-m", "hypothesis_slow", "tests", *session.posargs)


@nox.session
def lint(session: nox.Session) -> None:
    """Lint with Ruff."""
    session.install("ruff")
    session.run("ruff", "check", ".")


@nox.session
def lint_fixall(session: nox.Session) -> None:
    """Apply Ruff lint autofixes."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", ".")


@nox.session
def format_check(session: nox.Session) -> None:
    """Verify formatting."""
    session.install("ruff")
    session.run("ruff", "format", "--check", ".")


@nox.session
def format(session: nox.Session) -> None:
    """Apply formatting."""
    session.install("ruff")
    session.run("ruff", "format", ".")


@nox.session(python=CURRENT_PYTHON_VERSION)
def package_check(session: nox.Session) -> None:
    """Build sdist/wheel and validate the metadata."""
    session.install("build", "twine")
    session.run("python", "-m", "build", "--sdist", "--wheel")
    session.run("twine", "check", "dist/*")
