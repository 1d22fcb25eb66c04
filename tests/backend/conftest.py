"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with the FastAPI host wired to the
mock database and the fake query runtime.
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# App Override Helpers
# =============================================================================

@pytest.fixture
def trigger_parameters() -> dict:
    """Startup parameters handed to the trigger by the app lifespan."""
    return {}


@pytest.fixture
def app_with_mocks(broker, trigger_parameters):
    """
    Create the FastAPI app with database access mocked.

    The lifespan runs against the mock broker and receives
    `trigger_parameters` as its startup configuration.
    """
    from autostart.config import Settings

    settings = Settings(trigger_parameters=trigger_parameters, use_transactions=False)

    async def get_database(db_name=None):
        return broker.db

    async def get_broker():
        return broker

    with patch("autostart.main.get_database", side_effect=get_database), \
         patch("autostart.main.get_broker", side_effect=get_broker), \
         patch("autostart.main.get_settings", return_value=settings):

        from autostart.main import app
        yield app


@pytest.fixture
def client(app_with_mocks):
    """TestClient using the mocked app; entering it runs the startup lifespan."""
    from fastapi.testclient import TestClient

    with TestClient(app_with_mocks) as c:
        yield c
