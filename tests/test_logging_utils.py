import logging

import pytest
from rich.logging import RichHandler

from refiner import logging_utils


@pytest.fixture
def fresh_logger(monkeypatch):
    logger = logging.getLogger(logging_utils.PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.propagate, logger.level)
    monkeypatch.setattr(logging_utils, "_initialized", False)
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[0]
    logger.propagate = saved[1]
    logger.setLevel(saved[2])


def test_setup_installs_one_rich_handler(fresh_logger):
    logging_utils.setup_logging()
    logging_utils.setup_logging(verbose=True)

    assert len(fresh_logger.handlers) == 1
    assert isinstance(fresh_logger.handlers[0], RichHandler)
    assert fresh_logger.level == logging.DEBUG


def test_explicit_level_wins(fresh_logger):
    logging_utils.setup_logging(verbose=True, level=logging.WARNING)
    assert fresh_logger.level == logging.WARNING
