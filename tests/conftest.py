import logging

import pytest


@pytest.fixture(autouse=True)
def reset_qrdots_logger():
    """Drop handlers installed by setup_logging between tests."""
    yield
    logger = logging.getLogger("qrdots")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
