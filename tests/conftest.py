"""Shared pytest fixtures."""

import pytest
from loguru import logger

from autosnap.utils.config import reset_config


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Every test starts from default configuration."""
    for name in (
        "AUTOSNAP_ZFS_BIN",
        "AUTOSNAP_PROPERTY",
        "AUTOSNAP_SNAPSHOT_SUFFIX",
        "AUTOSNAP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)
