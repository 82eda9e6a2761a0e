"""Tests for runtime configuration and logging setup."""

import sys

import pytest
from loguru import logger

from autosnap.utils.config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROPERTY_KEY,
    Config,
    get_config,
    reset_config,
)
from autosnap.utils.logging import configure_logging


class TestConfig:
    """Tests for Config."""

    def test_defaults(self):
        """Without environment variables the defaults apply."""
        config = get_config()

        assert config.zfs_binary == "zfs"
        assert config.property_key == DEFAULT_PROPERTY_KEY == "at.rollc.at:snapkeep"
        assert config.snapshot_suffix == "autosnap"
        assert config.log_level == DEFAULT_LOG_LEVEL

    def test_from_env(self, monkeypatch):
        """AUTOSNAP_* variables override the defaults."""
        monkeypatch.setenv("AUTOSNAP_ZFS_BIN", "/sbin/zfs")
        monkeypatch.setenv("AUTOSNAP_PROPERTY", "com.example:keep")
        monkeypatch.setenv("AUTOSNAP_SNAPSHOT_SUFFIX", "cron")
        monkeypatch.setenv("AUTOSNAP_LOG_LEVEL", "debug")

        config = Config.from_env()

        assert config == Config(
            zfs_binary="/sbin/zfs",
            property_key="com.example:keep",
            snapshot_suffix="cron",
            log_level="DEBUG",
        )

    def test_invalid_log_level_falls_back(self, monkeypatch, log_messages):
        """An unknown log level is replaced by the default with a warning."""
        monkeypatch.setenv("AUTOSNAP_LOG_LEVEL", "chatty")

        config = Config.from_env()

        assert config.log_level == DEFAULT_LOG_LEVEL
        assert any("AUTOSNAP_LOG_LEVEL" in m["message"] for m in log_messages)

    def test_empty_values_use_defaults(self, monkeypatch):
        """Empty environment variables count as unset."""
        monkeypatch.setenv("AUTOSNAP_PROPERTY", "")

        assert Config.from_env().property_key == DEFAULT_PROPERTY_KEY

    def test_singleton(self, monkeypatch):
        """get_config() caches until reset_config()."""
        first = get_config()
        monkeypatch.setenv("AUTOSNAP_ZFS_BIN", "/sbin/zfs")

        assert get_config() is first

        reset_config()
        assert get_config().zfs_binary == "/sbin/zfs"

    def test_with_overrides(self):
        """None overrides are ignored, others replace the field."""
        config = Config().with_overrides(zfs_binary="/opt/zfs", property_key=None)

        assert config.zfs_binary == "/opt/zfs"
        assert config.property_key == DEFAULT_PROPERTY_KEY

    def test_frozen(self):
        """Config cannot be modified in place."""
        with pytest.raises(AttributeError):
            Config().zfs_binary = "other"


class TestConfigureLogging:
    """Tests for configure_logging()."""

    @pytest.fixture(autouse=True)
    def restore_default_sink(self):
        yield
        logger.remove()
        logger.add(sys.stderr)

    def test_level(self, capsys):
        """Messages below the level are dropped."""
        configure_logging("INFO")

        logger.debug("hidden")
        logger.info("shown")

        err = capsys.readouterr().err
        assert "shown" in err
        assert "hidden" not in err

    def test_quiet_only_errors(self, capsys):
        """Quiet mode emits errors only."""
        configure_logging("DEBUG", quiet=True)

        logger.warning("hidden")
        logger.error("shown")

        captured = capsys.readouterr()
        assert "shown" in captured.err
        assert "hidden" not in captured.err
        assert captured.out == ""
