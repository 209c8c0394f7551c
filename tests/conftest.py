"""Pytest configuration for the storefront tests."""
import pytest
from fastapi.testclient import TestClient

from main import app
from storefront.models import UserCreate
from storefront.storage import storage


@pytest.fixture(autouse=True)
def fresh_storage():
    storage.reset()
    yield storage
    storage.reset()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def logged_in_client(client):
    response = client.post("/api/auth/register", json={"username": "alice", "password": "secret123"})
    assert response.status_code == 201
    return client


@pytest.fixture
def user(fresh_storage):
    return fresh_storage.create_user(UserCreate(username="bob", password="hunter22"))
