import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog():
    # CLI tests configure structlog against a stream that CliRunner closes.
    yield
    structlog.reset_defaults()
