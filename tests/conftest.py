import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    """The CLI callback binds structlog to the (per-test) captured stderr; undo it after each test."""
    yield
    structlog.reset_defaults()
