"""
Exceptions raised at the ZFS storage boundary.
"""

from __future__ import annotations


class ZfsError(Exception):
    """Base exception for failures talking to ZFS."""

    pass


class ZfsCommandError(ZfsError):
    """A zfs command exited with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"zfs command error: {' '.join(command)} (exit {returncode})"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class ZfsParseError(ZfsError, ValueError):
    """Output of a zfs command could not be parsed."""

    pass


class NotASnapshotError(ZfsError, ValueError):
    """Refused to destroy something that is not a snapshot."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tried to destroy something that is not a snapshot: {name!r}")
