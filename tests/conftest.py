import logging

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers bound to per-test capture streams by setup_logging()."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
