import logging

import pytest

from protover import logging as plog
from protover.supported import free_all, set_support_table


@pytest.fixture(autouse=True)
def _fresh_support_table():
    """
    Every test starts from the built-in support table with no cached string,
    and leaves it that way (CLI and config tests install their own tables).
    """
    set_support_table(None)
    free_all()
    yield
    set_support_table(None)
    free_all()
    plog.clear_context()
    # The CLI configures handlers on the package logger; drop them.
    logger = logging.getLogger("protover")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


def pytest_configure(config):
    config.addinivalue_line("markers", "cli: tests that drive the protover command line")
