"""
Tests for exception classes and error handlers.
"""
import pytest
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from customer_api.api.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)
from customer_api.lib.exceptions import (
    AppException,
    ConflictException,
    NotFoundException,
    ProfileImageUploadException,
    UnauthorizedException,
    ValidationException,
)


@pytest.mark.unit
def test_app_exception_creation():
    exc = AppException(message="Test error", status_code=500, details={"key": "value"})

    assert exc.message == "Test error"
    assert exc.status_code == 500
    assert exc.details == {"key": "value"}
    assert str(exc) == "Test error"


@pytest.mark.unit
def test_not_found_exception():
    exc = NotFoundException("customer with id [1] not found", details={"resource_id": 1})

    assert exc.status_code == 404
    assert exc.details == {"resource_id": 1}


@pytest.mark.unit
def test_conflict_exception():
    exc = ConflictException("email already taken")

    assert exc.message == "email already taken"
    assert exc.status_code == 409
    assert exc.details == {}


@pytest.mark.unit
def test_validation_exception():
    exc = ValidationException("no data changes found")

    assert exc.status_code == 422
    assert exc.details == {}

    with_errors = ValidationException("Validation failed", errors={"email": "Invalid format"})
    assert with_errors.details["errors"] == {"email": "Invalid format"}


@pytest.mark.unit
def test_unauthorized_exception():
    exc = UnauthorizedException()

    assert exc.message == "Unauthorized"
    assert exc.status_code == 401


@pytest.mark.unit
def test_profile_image_upload_exception():
    exc = ProfileImageUploadException()

    assert exc.message == "failed to upload profile image"
    assert exc.status_code == 500


@pytest.fixture
def client():
    """Bare app with only the handlers under test registered."""
    app = FastAPI()
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    class Payload(BaseModel):
        age: int = Field(..., ge=0)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundException("customer with id [123] not found")

    @app.get("/unauthorized")
    async def unauthorized():
        raise UnauthorizedException("Bad credentials")

    @app.get("/correlated")
    async def correlated(request: Request):
        request.state.correlation_id = "corr-123"
        raise ConflictException("email already taken")

    @app.post("/validate")
    async def validate(payload: Payload):
        return {"ok": True}

    @app.get("/http-error")
    async def http_error():
        raise StarletteHTTPException(status_code=404, detail="Page not found")

    @app.get("/boom")
    async def boom():
        raise ValueError("Unexpected error")

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.integration
def test_app_exception_handler_in_route(client):
    response = client.get("/not-found")

    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "customer with id [123] not found"
    assert data["status_code"] == 404
    assert data["path"] == "/not-found"
    assert "timestamp" in data
    assert data["correlation_id"] == "unknown"


@pytest.mark.integration
def test_unauthorized_sets_authenticate_header(client):
    response = client.get("/unauthorized")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.integration
def test_exception_with_correlation_id(client):
    response = client.get("/correlated")

    assert response.status_code == 409
    assert response.json()["correlation_id"] == "corr-123"


@pytest.mark.integration
def test_validation_error_handler(client):
    response = client.post("/validate", json={"age": -5})

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "Validation error"
    assert data["details"]["errors"][0]["loc"] == ["body", "age"]


@pytest.mark.integration
def test_http_exception_handler(client):
    response = client.get("/http-error")

    assert response.status_code == 404
    assert response.json()["error"] == "Page not found"


@pytest.mark.integration
def test_unhandled_exception_handler(client):
    response = client.get("/boom")

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "Internal server error"
    assert data["status_code"] == 500
