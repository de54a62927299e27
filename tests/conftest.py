"""
Pytest configuration and fixtures.

Every test gets a fresh mongomock client.  The ``db`` fixture and the
application share it, so API tests can seed documents directly.
"""

from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient

from bookstore_api.app.core.db import init_db
from bookstore_api.app.core.security import create_access_token
from bookstore_api.app.main import create_app

TEST_DATABASE = "library_test"


@pytest.fixture
def mongo_client():
    return mongomock.MongoClient()


@pytest.fixture
def db(mongo_client):
    """Database with the production indexes applied."""
    database = mongo_client[TEST_DATABASE]
    init_db(database)
    return database


@pytest.fixture
def app(mongo_client):
    """Create a test application bound to the mongomock client."""
    return create_app(client=mongo_client, database_name=TEST_DATABASE)


@pytest.fixture
def client(app):
    """Create a test client.  Entering it runs the startup handlers."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Factory returning an Authorization header for the given email."""

    def _headers(email="reader@example.com"):
        return {"Authorization": f"Bearer {create_access_token({'email': email})}"}

    return _headers


@pytest.fixture
def timestamps():
    """Strictly increasing timestamps, oldest first."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [base + timedelta(hours=i) for i in range(10)]
