import pytest

from qa_service.core.logging.builder import setup_logging

from ..conftest import make_settings


@pytest.fixture(autouse=True)
def restore_logging():
    """Tests here reconfigure logging, so put the suite's stdout config back afterwards."""
    yield
    setup_logging(make_settings())
