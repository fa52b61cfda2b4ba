"""Shared fixtures for HTTP-level tests.

The app runs against a fresh seeded in-memory customer store and a local
object store under tmp_path, wired in through dependency overrides.
"""
import pytest
from fastapi.testclient import TestClient

from customer_api.api.app import app
from customer_api.api.dependencies import get_customer_store, get_object_store
from customer_api.lib.jwt import issue_token
from customer_api.lib.metrics import reset_metrics
from customer_api.services.customer_store import InMemoryCustomerStore
from customer_api.services.object_store import LocalObjectStore


@pytest.fixture
def memory_store():
    return InMemoryCustomerStore()


@pytest.fixture
def object_store(tmp_path):
    return LocalObjectStore(tmp_path / "objects")


@pytest.fixture
def api_app(memory_store, object_store):
    app.dependency_overrides[get_customer_store] = lambda: memory_store
    app.dependency_overrides[get_object_store] = lambda: object_store
    reset_metrics()
    yield app
    app.dependency_overrides.clear()
    reset_metrics()


@pytest.fixture
def client(api_app):
    return TestClient(api_app)


@pytest.fixture
def auth_headers():
    """Bearer header for the seeded customer Alex."""
    return {"Authorization": f"Bearer {issue_token('alex@gmail.com')}"}
