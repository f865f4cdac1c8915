"""
Shared pytest fixtures.
"""

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration made by CLI runs."""
    yield
    structlog.reset_defaults()
