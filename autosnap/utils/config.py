"""
Runtime configuration for zfs-autosnap.

Values come from environment variables and are cached in a process-wide
singleton. Command-line flags override them for a single run.

Usage:
    from autosnap.utils.config import get_config

    config = get_config()
    config.property_key  # 'at.rollc.at:snapkeep'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from loguru import logger

# ZFS user property holding the retention policy; '-' means untracked.
DEFAULT_PROPERTY_KEY = "at.rollc.at:snapkeep"
DEFAULT_ZFS_BINARY = "zfs"
DEFAULT_SNAPSHOT_SUFFIX = "autosnap"
DEFAULT_LOG_LEVEL = "WARNING"

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    """
    zfs-autosnap configuration.

    Attributes:
        zfs_binary: Path or name of the zfs executable
        property_key: User property carrying the retention policy
        snapshot_suffix: Suffix appended to auto-generated snapshot names
        log_level: Minimum loguru level written to stderr
    """

    zfs_binary: str = DEFAULT_ZFS_BINARY
    property_key: str = DEFAULT_PROPERTY_KEY
    snapshot_suffix: str = DEFAULT_SNAPSHOT_SUFFIX
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> Config:
        """Build configuration from AUTOSNAP_* environment variables."""
        log_level = os.getenv("AUTOSNAP_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            logger.warning(
                f"Invalid AUTOSNAP_LOG_LEVEL '{log_level}', using {DEFAULT_LOG_LEVEL}"
            )
            log_level = DEFAULT_LOG_LEVEL

        return cls(
            zfs_binary=os.getenv("AUTOSNAP_ZFS_BIN") or DEFAULT_ZFS_BINARY,
            property_key=os.getenv("AUTOSNAP_PROPERTY") or DEFAULT_PROPERTY_KEY,
            snapshot_suffix=os.getenv("AUTOSNAP_SNAPSHOT_SUFFIX") or DEFAULT_SNAPSHOT_SUFFIX,
            log_level=log_level,
        )

    def with_overrides(self, **overrides: str | None) -> Config:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_config: Config | None = None


def get_config() -> Config:
    """Return the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration (used by tests)."""
    global _config
    _config = None
