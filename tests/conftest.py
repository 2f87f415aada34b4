import os
import tempfile
import uuid

# Point the app at a throwaway database before anything imports jokester.
_DB_DIR = tempfile.mkdtemp(prefix="jokester-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

from jokester.main import app as jokester_app

JSON = {"Accept": "application/json"}
VALID_CONTENT = "Why did the chicken cross the road? To get to the other side."


@pytest.fixture
def app():
    return jokester_app


@pytest.fixture
def client(app):
    """Test client; server errors come back as 500 pages instead of raising."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def register(client: TestClient, username: str | None = None, password: str = "twixrox") -> str:
    """Register a fresh user; the session cookie stays on ``client``."""
    username = username or f"user-{uuid.uuid4().hex[:8]}"
    response = client.post(
        "/login",
        data={"loginType": "register", "username": username, "password": password},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return username


def post_joke(client: TestClient, name: str = "Chuck", content: str = VALID_CONTENT) -> str:
    """Create a joke as the signed-in user and return its id."""
    response = client.post(
        "/jokes/new", data={"name": name, "content": content}, follow_redirects=False
    )
    assert response.status_code == 303
    return response.headers["location"].rsplit("/", 1)[-1]


@pytest.fixture
def signed_in(client):
    """Client with a freshly registered user signed in."""
    register(client)
    return client
