"""Loguru sink setup for the command-line entry point."""

from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "WARNING", quiet: bool = False) -> None:
    """
    Route loguru output to stderr at the requested level.

    Report output goes to stdout via print(), so logs never mix with it.

    Args:
        level: Minimum level to emit (e.g. 'DEBUG', 'INFO', 'WARNING')
        quiet: If True, only errors are emitted regardless of `level`
    """
    logger.remove()
    logger.add(sys.stderr, level="ERROR" if quiet else level)
