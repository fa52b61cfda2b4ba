"""Authentication routes.

Provides email/password login:
- POST /api/v1/auth/login: Verify credentials and get a JWT token
"""
from fastapi import APIRouter, Depends, Response, status

from customer_api.api.dependencies import get_auth_service
from customer_api.services.auth_service import (
    AuthenticationRequest,
    AuthenticationResponse,
    AuthService,
)


router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=AuthenticationResponse,
    status_code=status.HTTP_200_OK,
    summary="Login",
    description="Verify email and password and receive a JWT access token"
)
def login(
    request: AuthenticationRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthenticationResponse:
    """Log a customer in.

    The token is returned both in the body and in the Authorization header.

    Raises:
        401: Bad credentials
    """
    result = auth_service.login(request)
    response.headers["Authorization"] = result.token
    return result
