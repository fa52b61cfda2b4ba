"""Customer routes.

Provides customer CRUD and profile image endpoints:
- GET    /api/v1/customers
- GET    /api/v1/customers/{customer_id}
- POST   /api/v1/customers                (public, returns a token)
- DELETE /api/v1/customers/{customer_id}
- PUT    /api/v1/customers/{customer_id}
- POST   /api/v1/customers/{customer_id}/profile-image
- GET    /api/v1/customers/{customer_id}/profile-image   (public)
"""
from typing import List

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from customer_api.api.dependencies import get_current_username, get_customer_service
from customer_api.lib.jwt import issue_token
from customer_api.models.customers import DEFAULT_ROLES
from customer_api.services.customer_dto import (
    CustomerDTO,
    CustomerRegistrationRequest,
    CustomerUpdateRequest,
)
from customer_api.services.customer_service import CustomerService


router = APIRouter(prefix="/api/v1/customers", tags=["customers"])


@router.get(
    "",
    response_model=List[CustomerDTO],
    dependencies=[Depends(get_current_username)],
)
def get_customers(
    customer_service: CustomerService = Depends(get_customer_service),
) -> List[CustomerDTO]:
    return customer_service.get_all_customers()


@router.get(
    "/{customer_id}",
    response_model=CustomerDTO,
    dependencies=[Depends(get_current_username)],
)
def get_customer(
    customer_id: int,
    customer_service: CustomerService = Depends(get_customer_service),
) -> CustomerDTO:
    return customer_service.get_customer(customer_id)


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Register customer",
    description="Register a customer and receive an access token in the Authorization header",
)
def register_customer(
    request: CustomerRegistrationRequest,
    customer_service: CustomerService = Depends(get_customer_service),
) -> Response:
    """Register a customer.

    Raises:
        409: Email already taken
        422: Invalid payload
    """
    customer_service.add_customer(request)
    token = issue_token(request.email, DEFAULT_ROLES)
    return Response(status_code=status.HTTP_200_OK, headers={"Authorization": token})


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(get_current_username)],
)
def delete_customer(
    customer_id: int,
    customer_service: CustomerService = Depends(get_customer_service),
) -> Response:
    customer_service.delete_customer_by_id(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{customer_id}",
    dependencies=[Depends(get_current_username)],
)
def update_customer(
    customer_id: int,
    request: CustomerUpdateRequest,
    customer_service: CustomerService = Depends(get_customer_service),
) -> Response:
    """Partially update a customer.

    Raises:
        404: Customer not found
        409: Email already taken
        422: No data changes found
    """
    customer_service.update_customer(customer_id, request)
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/{customer_id}/profile-image",
    dependencies=[Depends(get_current_username)],
)
def upload_customer_profile_image(
    customer_id: int,
    file: UploadFile = File(...),
    customer_service: CustomerService = Depends(get_customer_service),
) -> Response:
    customer_service.upload_customer_profile_image(customer_id, file.file)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/{customer_id}/profile-image",
    response_class=Response,
    responses={200: {"content": {"image/jpeg": {}}}},
)
def get_customer_profile_image(
    customer_id: int,
    customer_service: CustomerService = Depends(get_customer_service),
) -> Response:
    image = customer_service.get_customer_profile_image(customer_id)
    return Response(content=image, media_type="image/jpeg")
