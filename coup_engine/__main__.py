"""
Run the coup-engine CLI.

Usage:
    python -m coup_engine simulate --players 4 --seed 7
"""

import sys

from .interface.cli import main

if __name__ == "__main__":
    sys.exit(main())
