import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_kreolsafe_logging():
    """Drop handlers bound to per-test capture streams."""
    yield
    logging.getLogger("kreolsafe").handlers.clear()
