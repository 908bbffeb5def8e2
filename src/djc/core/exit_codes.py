# topmark:header:start
#
#   file         : exit_codes.py
#   file_relpath : src/djc/core/exit_codes.py
#   project      : DJC
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Defines standardized exit codes used by the DJC CLI application."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for DJC CLI.

    Attributes:
        SUCCESS (int): The command completed without errors.
        FAILURE (int): Any failure: validation, execution, or a failure in the
            outer pre-filter before the command ran.

    Usage:
        ```python
        import subprocess
        from djc.core.exit_codes import ExitCode

        result = subprocess.run(["djc", "data", "split", "-f", "plan.json"])
        if result.returncode == ExitCode.SUCCESS:
            print("Split completed.")
        ```
    """

    SUCCESS = 0
    FAILURE = 1
