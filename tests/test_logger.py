import logging

from zest.logger import LOGGER_NAME, setup_logger


def test_setup_logger_is_idempotent(tmp_path):
    logger = logging.getLogger(LOGGER_NAME)
    saved = list(logger.handlers)
    logger.handlers.clear()
    try:
        first = setup_logger(tmp_path / "logs")
        second = setup_logger(tmp_path / "logs")
        assert first is second
        assert len(first.handlers) == 2
        assert (tmp_path / "logs" / "zest.log").exists()
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = saved
