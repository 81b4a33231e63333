"""Pytest fixtures for API and repository testing."""
import os
import tempfile

# Settings are read at import time, so configure them before importing the app
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="openbook-test-"))

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from openbook.main import app
from openbook.db.database import close_db, get_db, init_db


@pytest.fixture(scope="function")
def database_path(tmp_path):
    """Point the shared database at a fresh file for each test."""
    path = str(tmp_path / "test.db")
    get_db().db_path = path
    return path


@pytest.fixture(scope="function")
def client(database_path):
    """Test client; the lifespan creates and seeds the database."""
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def database(tmp_path):
    """Initialized and seeded database for repository tests."""
    await get_db().set_db_path(str(tmp_path / "repositories.db"))
    await init_db()
    yield get_db()
    await close_db()


def _login(client, username, password):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin", "admin123")


@pytest.fixture
def contributor_headers(client):
    return _login(client, "contributor", "contrib123")


@pytest.fixture
def visitor_headers(client):
    return _login(client, "visitor", "visit123")


@pytest.fixture
def sample_page(client, admin_headers):
    """A page created by the admin."""
    response = client.post(
        "/api/wiki/",
        json={"title": "Sample Page", "content": "Original content"},
        headers=admin_headers
    )
    assert response.status_code == 201, response.text
    return response.json()["page"]


@pytest.fixture
def login_as(client):
    """Log in as any user and return the authorization headers."""
    def _as(username, password):
        return _login(client, username, password)
    return _as
