"""Main entry point for running blaze_solid as a module.

This allows running Blaze Solid with:
    python -m blaze_solid
    python -m blaze_solid --health-check
    python -m blaze_solid --calc 123456789 "*" 987654321
    python -m blaze_solid --analyze 3.141592653589793

This is equivalent to running:
    python -m blaze_solid.cli
    blaze-solid
"""

from __future__ import annotations

import sys

from .cli import main_entry

if __name__ == "__main__":
    sys.exit(main_entry())
