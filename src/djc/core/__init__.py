# topmark:header:start
#
#   project      : DJC
#   file         : __init__.py
#   file_relpath : src/djc/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core types shared by every layer.

Rules:
  - No console output.
  - No imports from ``djc.runtime`` or ``djc.cli`` at runtime.
"""

from __future__ import annotations
