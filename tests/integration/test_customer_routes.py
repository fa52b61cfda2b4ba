"""Integration tests for customer routes."""
import io

import pytest

from customer_api.lib.jwt import get_subject, issue_token
from customer_api.services.customer_service import profile_image_key
from customer_api.lib.settings import settings


def _registration(**overrides):
    payload = {
        "name": "Ali",
        "email": "ali@gmail.com",
        "password": "password",
        "age": 30,
        "gender": "MALE",
    }
    payload.update(overrides)
    return payload


@pytest.mark.integration
def test_register_customer_returns_token(client, memory_store):
    response = client.post("/api/v1/customers", json=_registration())

    assert response.status_code == 200
    assert get_subject(response.headers["Authorization"]) == "ali@gmail.com"

    stored = memory_store.select_customer_by_email("ali@gmail.com")
    assert stored is not None
    assert stored.password != "password"
    assert stored.roles == ["ROLE_USER"]


@pytest.mark.integration
def test_register_token_grants_access(client):
    token = client.post("/api/v1/customers", json=_registration()).headers["Authorization"]

    response = client.get("/api/v1/customers", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert "ali@gmail.com" in [c["email"] for c in response.json()]


@pytest.mark.integration
def test_register_duplicate_email(client):
    response = client.post("/api/v1/customers", json=_registration(email="alex@gmail.com"))

    assert response.status_code == 409
    assert response.json()["error"] == "email already taken"


@pytest.mark.integration
@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"age": -1},
        {"gender": "OTHER"},
        {"name": ""},
    ],
)
def test_register_invalid_payload(client, overrides):
    response = client.post("/api/v1/customers", json=_registration(**overrides))

    assert response.status_code == 422
    assert response.json()["error"] == "Validation error"


@pytest.mark.integration
def test_list_customers_requires_token(client):
    response = client.get("/api/v1/customers")

    assert response.status_code == 401
    assert response.json()["error"] == "Not authenticated"


@pytest.mark.integration
def test_invalid_token_rejected(client):
    response = client.get("/api/v1/customers", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid authentication token"


@pytest.mark.integration
def test_token_for_unknown_customer_rejected(client):
    token = issue_token("ghost@gmail.com")

    response = client.get("/api/v1/customers", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


@pytest.mark.integration
def test_list_customers(client, auth_headers):
    response = client.get("/api/v1/customers", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert [c["email"] for c in data] == ["alex@gmail.com", "jamila@gmail.com"]
    assert all("password" not in c for c in data)


@pytest.mark.integration
def test_get_customer(client, auth_headers):
    response = client.get("/api/v1/customers/2", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Jamila"
    assert data["username"] == "jamila@gmail.com"
    assert data["profile_image_id"] is None


@pytest.mark.integration
def test_get_customer_not_found(client, auth_headers):
    response = client.get("/api/v1/customers/999", headers=auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "customer with id [999] not found"


@pytest.mark.integration
def test_update_customer(client, auth_headers, memory_store):
    response = client.put("/api/v1/customers/2", json={"name": "Jamila A.", "age": 20}, headers=auth_headers)

    assert response.status_code == 200
    updated = memory_store.select_customer_by_id(2)
    assert updated.name == "Jamila A."
    assert updated.age == 20
    assert updated.email == "jamila@gmail.com"


@pytest.mark.integration
def test_update_customer_no_changes(client, auth_headers):
    response = client.put("/api/v1/customers/2", json={"name": "Jamila"}, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error"] == "no data changes found"


@pytest.mark.integration
def test_update_customer_email_taken(client, auth_headers):
    response = client.put("/api/v1/customers/2", json={"email": "alex@gmail.com"}, headers=auth_headers)

    assert response.status_code == 409
    assert response.json()["error"] == "email already taken"


@pytest.mark.integration
def test_update_customer_not_found(client, auth_headers):
    response = client.put("/api/v1/customers/999", json={"name": "X"}, headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.integration
def test_delete_customer(client, auth_headers, memory_store):
    response = client.delete("/api/v1/customers/2", headers=auth_headers)

    assert response.status_code == 204
    assert not memory_store.exists_customer_by_id(2)

    response = client.delete("/api/v1/customers/2", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.integration
def test_upload_and_download_profile_image(client, auth_headers, memory_store, object_store):
    image = b"\xff\xd8\xff\xe0fake-jpeg-bytes"

    response = client.post(
        "/api/v1/customers/1/profile-image",
        files={"file": ("me.jpg", io.BytesIO(image), "image/jpeg")},
        headers=auth_headers,
    )
    assert response.status_code == 200

    profile_image_id = memory_store.select_customer_by_id(1).profile_image_id
    assert profile_image_id is not None
    assert object_store.get_object(
        settings.s3_customer_bucket, profile_image_key(1, profile_image_id)
    ) == image

    # Download is public
    response = client.get("/api/v1/customers/1/profile-image")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content == image


@pytest.mark.integration
def test_upload_profile_image_requires_token(client):
    response = client.post(
        "/api/v1/customers/1/profile-image",
        files={"file": ("me.jpg", io.BytesIO(b"x"), "image/jpeg")},
    )

    assert response.status_code == 401


@pytest.mark.integration
def test_upload_profile_image_unknown_customer(client, auth_headers):
    response = client.post(
        "/api/v1/customers/999/profile-image",
        files={"file": ("me.jpg", io.BytesIO(b"x"), "image/jpeg")},
        headers=auth_headers,
    )

    assert response.status_code == 404
    assert response.json()["error"] == "customer with id [999] not found"


@pytest.mark.integration
def test_profile_image_missing(client):
    response = client.get("/api/v1/customers/2/profile-image")

    assert response.status_code == 404
    assert response.json()["error"] == "customer with id [2] profile image not found"
