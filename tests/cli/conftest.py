# topmark:header:start
#
#   project      : DJC
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running DJC in a controlled working directory.

`run_cli_in()` changes the process working directory to the given directory
before invoking the Click CLI, so relative ``--dataplan`` paths resolve
against the test's temporary directory.

All CLI tests run with ``DJC_SOFT_EXIT`` set: the invoker hands control back
and the Click context exits with the pending exit code, which CliRunner
records.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, Any, Sequence

import pytest
from click.testing import CliRunner, Result

from djc.cli.main import cli
from djc.config.env import EnvVar
from djc.core.exit_codes import ExitCode


@pytest.fixture(autouse=True)
def soft_exit(clean_djc_env: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from terminating the test process."""
    monkeypatch.setenv(EnvVar.SOFT_EXIT, "1")


def run_cli_in(
    tmp_path: Path,
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
    obj: dict[str, Any] | None = None,
) -> Result:
    """Invoke the CLI with `tmp_path` as the working directory.

    Args:
        tmp_path (Path): Directory used as the CWD for the command invocation.
        argv (str | Sequence[str] | None): CLI argument vector,
            e.g. ``["data", "split", "-f", "plan.json"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input.
        obj (dict[str, Any] | None): Click context object; receives the
            invocation outcome under ``"outcome"``.

    Returns:
        Result: The `click.testing.Result` produced by `CliRunner.invoke`.
    """
    runner = CliRunner()
    cwd: str = os.getcwd()
    try:
        os.chdir(tmp_path)
        return runner.invoke(
            cli,
            argv,
            input=input_text,
            obj=obj if obj is not None else {},
        )
    finally:
        os.chdir(cwd)


def run_cli(
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
    obj: dict[str, Any] | None = None,
) -> Result:
    """Invoke the CLI without changing the working directory.

    Use this helper when the test does **not** depend on files created in
    ``tmp_path`` (e.g., ``--help`` / ``--version``) or when all provided paths
    are absolute.
    """
    runner = CliRunner()
    return runner.invoke(cli, argv, input=input_text, obj=obj if obj is not None else {})


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0)."""
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_FAILURE(result: Result) -> None:
    """Assert that the command exited with FAILURE (code 1)."""
    assert result.exit_code == ExitCode.FAILURE, result.output
