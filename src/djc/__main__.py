# topmark:header:start
#
#   project      : DJC
#   file         : __main__.py
#   file_relpath : src/djc/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running DJC via ``python -m djc``.

Equivalent to running the ``djc`` console script.

Examples:
    Split the data files referenced by a plan::

        python -m djc data split -f data/plan.json
"""

from __future__ import annotations

from djc.cli.main import cli

if __name__ == "__main__":
    cli()
