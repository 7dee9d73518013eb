"""Tests for finstate.core.utils.logging."""

import sys

import pytest
from loguru import logger

from finstate.core.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_file_sink(tmp_path):
    log_file = tmp_path / "finstate.log"
    setup_logging(level="info", log_file=str(log_file))
    logger.info("reconciled BTC")
    logger.debug("hidden")
    logger.complete()

    content = log_file.read_text()
    assert "reconciled BTC" in content
    assert "hidden" not in content


def test_unknown_level_raises():
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging(level="LOUD")
