"""Tests for the engine's logging setup."""

import logging

import pytest

from blaze_solid.logging_config import StructuredFormatter, get_logger, setup_logging
from blaze_solid.pool import SolidPool, init_exact


@pytest.fixture
def restore_engine_logger():
    logger = logging.getLogger("blaze_solid")
    level, handlers = logger.level, list(logger.handlers)
    yield
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_module_loggers_share_the_namespace():
    assert get_logger("pool").name == "blaze_solid.pool"


def test_formatter_line():
    record = logging.LogRecord("blaze_solid.pool", logging.WARNING, __file__, 1, "slot %d", (3,), None)
    line = StructuredFormatter().format(record)
    assert line.endswith("[WARNING] blaze_solid.pool: slot 3")


def test_pool_exhaustion_reaches_log_file(tmp_path, restore_engine_logger):
    log_file = tmp_path / "engine.log"
    logger = setup_logging(level="warning", log_file=str(log_file))
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 2

    pool = SolidPool(1)
    init_exact("1", pool)
    assert init_exact("2", pool) is None
    for handler in logger.handlers:
        handler.flush()
    assert "[WARNING] blaze_solid.pool: Solid pool exhausted" in log_file.read_text()


def test_setup_is_idempotent(restore_engine_logger):
    setup_logging("DEBUG")
    logger = setup_logging("ERROR")
    assert len(logger.handlers) == 1
    assert logger.level == logging.ERROR
