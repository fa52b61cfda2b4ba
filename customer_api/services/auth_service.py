"""Authentication service for email/password login.

Handles the login flow:
1. Look up the customer by email
2. Check the raw password against the stored hash
3. Issue a JWT for the customer and return it with the customer DTO
"""
from typing import Optional

from pydantic import BaseModel, Field

from customer_api.lib.exceptions import UnauthorizedException
from customer_api.lib.jwt import issue_token
from customer_api.lib.metrics import MetricsCollector, get_metrics_collector
from customer_api.lib.passwords import PasswordHasher, password_hasher
from customer_api.services.customer_dto import CustomerDTO, to_customer_dto
from customer_api.services.customer_store import CustomerStore


class AuthenticationRequest(BaseModel):
    """Login payload; the username is the customer's email."""
    username: str = Field(..., min_length=1, examples=["alex@gmail.com"])
    password: str = Field(..., min_length=1)


class AuthenticationResponse(BaseModel):
    """Login result."""
    token: str = Field(..., description="JWT access token")
    customer_dto: CustomerDTO


class AuthService:
    """Authenticates customers against the customer store."""

    def __init__(
        self,
        store: CustomerStore,
        hasher: PasswordHasher = password_hasher,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.store = store
        self.hasher = hasher
        self.metrics = metrics or get_metrics_collector()

    def login(self, request: AuthenticationRequest) -> AuthenticationResponse:
        """Verify credentials and issue a token.

        Unknown emails and wrong passwords fail the same way so callers
        cannot probe which emails are registered.

        Raises:
            UnauthorizedException: If the credentials are invalid
        """
        customer = self.store.select_customer_by_email(request.username)
        if customer is None or not self.hasher.verify(customer.password, request.password):
            self.metrics.increment_logins(status="failure")
            raise UnauthorizedException("Bad credentials")

        self.metrics.increment_logins(status="success")
        dto = to_customer_dto(customer)
        token = issue_token(dto.username, dto.roles)
        return AuthenticationResponse(token=token, customer_dto=dto)
