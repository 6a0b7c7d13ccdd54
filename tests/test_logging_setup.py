import logging
from pathlib import Path

import pytest

from utils import LOGGER_NAME, setup_logging


def own_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [handler for handler in logger.handlers if type(handler).__module__.startswith("logging")]


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_propagate = logger.propagate
    logger.handlers.clear()
    logger.propagate = True
    yield logger
    for handler in own_handlers(logger):
        handler.close()
    logger.handlers[:] = saved_handlers
    logger.propagate = saved_propagate


def test_setup_logging_writes_dated_logs(tmp_path: Path, clean_logger: logging.Logger) -> None:
    clean_logger.handlers[:] = own_handlers(clean_logger)
    logger = setup_logging(tmp_path / "logs", "info")
    logger.error("tracker busy")

    log_files = sorted(path.name for path in (tmp_path / "logs").iterdir())
    assert len(log_files) == 2
    assert all(name.startswith("stale_") for name in log_files)
    assert logger.level == logging.INFO
    assert not logger.propagate


def test_setup_logging_installs_handlers_once(clean_logger: logging.Logger) -> None:
    clean_logger.handlers[:] = own_handlers(clean_logger)
    setup_logging()
    setup_logging(level="DEBUG")

    assert len(own_handlers(clean_logger)) == 1
    assert clean_logger.level == logging.DEBUG
