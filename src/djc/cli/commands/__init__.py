# topmark:header:start
#
#   project      : DJC
#   file         : __init__.py
#   file_relpath : src/djc/cli/commands/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click commands and topic groups of the DJC CLI."""
