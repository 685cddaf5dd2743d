"""Shared fixtures for the test suite."""

import base64
import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from api.main import create_app
from auth import JWTAuth
from database import DatabaseManager
from notifier import EventNotifier


TEST_KEY = base64.b64encode(b"0123456789abcdef0123456789abcdef").decode()


@pytest.fixture
def tmp_db(tmp_path):
    """Fresh DatabaseManager backed by a real SQLite DB in tmp_path."""
    db_path = str(tmp_path / "test.db")
    db = DatabaseManager(db_path=db_path)
    yield db
    db.close()


@pytest.fixture
def jwt_auth():
    return JWTAuth(TEST_KEY)


@pytest.fixture
def writer_token(jwt_auth):
    """Token with full access (writers also get the reader role)."""
    return jwt_auth.issue(["reader", "writer"])


@pytest.fixture
def reader_token(jwt_auth):
    return jwt_auth.issue(["reader"])


@pytest.fixture
def mock_notifier():
    return MagicMock(spec=EventNotifier)


@pytest.fixture
def client(tmp_db, jwt_auth, mock_notifier):
    """TestClient around an app wired to the real DB and a mock notifier."""
    app = create_app(tmp_db, jwt_auth, mock_notifier)
    return TestClient(app)


@pytest.fixture
def auth_header():
    """Factory for Authorization headers."""
    def _make(token):
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture
def sample_company():
    """Factory fixture: call with overrides to get a create payload."""
    def _make(**overrides):
        payload = {
            "name": "newcompany",
            "description": "Makes things",
            "employee_count": 15,
            "is_registered": True,
            "type": "Corporations",
        }
        payload.update(overrides)
        return payload
    return _make
