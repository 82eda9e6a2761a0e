"""
Entry point for running the CLI as a module.

Usage:
    python -m autosnap status
"""

import sys

from autosnap.cli import main

if __name__ == "__main__":
    sys.exit(main())
