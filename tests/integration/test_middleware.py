"""
Integration tests for FastAPI middleware (CORS, correlation_id).
"""
import uuid

import pytest
from fastapi.testclient import TestClient

from customer_api.api.app import app

client = TestClient(app)


@pytest.mark.integration
def test_cors_headers_included():
    """Test that CORS headers are included in responses."""
    response = client.get(
        "/health",
        headers={"Origin": "http://localhost:3000"}
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:3000")


@pytest.mark.integration
def test_cors_preflight_request():
    """Test CORS preflight (OPTIONS) request."""
    response = client.options(
        "/api/v1/auth/login",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        }
    )

    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers
    assert "access-control-allow-methods" in response.headers


@pytest.mark.integration
def test_authorization_header_exposed():
    response = client.get(
        "/health",
        headers={"Origin": "http://localhost:3000"}
    )

    exposed = response.headers["access-control-expose-headers"].lower()
    assert "authorization" in exposed
    assert "x-correlation-id" in exposed


@pytest.mark.integration
def test_correlation_id_generated():
    """Test that correlation ID is generated if not provided."""
    response = client.get("/health")

    assert response.status_code == 200
    assert "X-Correlation-ID" in response.headers

    correlation_id = response.headers["X-Correlation-ID"]
    try:
        uuid.UUID(correlation_id)
    except ValueError:
        pytest.fail(f"Correlation ID is not a valid UUID: {correlation_id}")


@pytest.mark.integration
def test_correlation_id_preserved():
    """Test that provided correlation ID is preserved in response."""
    custom_correlation_id = str(uuid.uuid4())

    response = client.get(
        "/health",
        headers={"X-Correlation-ID": custom_correlation_id}
    )

    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == custom_correlation_id


@pytest.mark.integration
def test_correlation_id_on_error():
    """Test that correlation ID is included in error responses."""
    custom_correlation_id = str(uuid.uuid4())

    response = client.post(
        "/api/v1/auth/login",
        json={"username": "alex@gmail.com"},
        headers={"X-Correlation-ID": custom_correlation_id}
    )

    assert response.status_code == 422
    assert response.headers["X-Correlation-ID"] == custom_correlation_id
    assert response.json()["correlation_id"] == custom_correlation_id


@pytest.mark.integration
def test_unknown_route_uses_error_envelope():
    response = client.get("/api/v1/nothing-here")

    assert response.status_code == 404
    data = response.json()
    assert data["path"] == "/api/v1/nothing-here"
    assert data["status_code"] == 404
    assert "error" in data


@pytest.mark.integration
def test_lifespan_events():
    """
    Test that lifespan events execute without errors.
    This is implicit - if the TestClient initializes, lifespan worked.
    """
    with TestClient(app) as test_client:
        response = test_client.get("/health")
        assert response.status_code == 200
