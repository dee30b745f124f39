import pytest
import os
from unittest.mock import MagicMock, patch
from dotenv import load_dotenv

@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    # Depends on _load_env to ensure .env is loaded first
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))

# Global setup to ensure we don't accidentally touch the real badge DB

@pytest.fixture(scope="function")
def test_db(tmp_path):
    """
    Creates a temporary database for testing and initializes the schema.
    `store.db` reads DB_PATH from the cached settings singleton on every connection,
    so patching the singleton is enough.
    """
    db_file = tmp_path / "test_badges.db"

    from dei_badger.config import get_settings
    settings = get_settings()

    original_db_path = settings.DB_PATH
    settings.DB_PATH = str(db_file)

    from dei_badger.store.db import init_db
    init_db()

    yield settings

    settings.DB_PATH = original_db_path

@pytest.fixture
def mock_httpx():
    """
    Mocks httpx.Client for provider tests.
    Yields the client instance used inside `with httpx.Client(...) as client`.
    """
    with patch("httpx.Client") as mock_client:
        yield mock_client.return_value.__enter__.return_value

def _json_response(data, status_code: int = 200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = data
    resp.raise_for_status.return_value = None
    return resp

@pytest.fixture
def json_response():
    """
    Factory for stand-ins of httpx.Response whose .json() returns the given data.
    """
    return _json_response
