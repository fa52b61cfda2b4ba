"""
API dependencies for FastAPI dependency injection.

Wires stores, the object store and services per request, and provides
bearer-token authentication.
"""
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jwt.exceptions import InvalidTokenError

from customer_api.lib.db import get_db_context
from customer_api.lib.exceptions import UnauthorizedException
from customer_api.lib.jwt import get_subject
from customer_api.lib.settings import settings
from customer_api.services.auth_service import AuthService
from customer_api.services.customer_service import CustomerService
from customer_api.services.customer_store import (
    CustomerStore,
    InMemoryCustomerStore,
    build_customer_store,
)
from customer_api.services.object_store import ObjectStore, build_object_store


# HTTP Bearer token security scheme; missing credentials are reported by us as 401
security = HTTPBearer(auto_error=False)


def get_memory_store(request: Request) -> InMemoryCustomerStore:
    """Process-wide in-memory store, created on first use and kept on app.state."""
    store = getattr(request.app.state, "memory_store", None)
    if store is None:
        store = InMemoryCustomerStore(page_size=settings.customer_page_size)
        request.app.state.memory_store = store
    return store


def get_customer_store(request: Request) -> Generator[CustomerStore, None, None]:
    """
    Dependency yielding the configured customer store.

    The SQL backend gets a fresh session per request, closed afterwards.
    """
    if settings.customer_store.strip().lower() == "memory":
        yield build_customer_store(settings, memory_store=get_memory_store(request))
        return

    with get_db_context() as db:
        yield build_customer_store(settings, session=db)


def get_object_store(request: Request) -> ObjectStore:
    """Object store built once per process (the boto3 client is reusable)."""
    object_store = getattr(request.app.state, "object_store", None)
    if object_store is None:
        object_store = build_object_store(settings)
        request.app.state.object_store = object_store
    return object_store


def get_customer_service(
    store: CustomerStore = Depends(get_customer_store),
    object_store: ObjectStore = Depends(get_object_store),
) -> CustomerService:
    return CustomerService(store, object_store, bucket=settings.s3_customer_bucket)


def get_auth_service(
    store: CustomerStore = Depends(get_customer_store),
) -> AuthService:
    return AuthService(store)


def get_current_username(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: CustomerStore = Depends(get_customer_store),
) -> str:
    """
    Dependency returning the email of the authenticated customer.

    Raises:
        UnauthorizedException: 401 if the token is missing, invalid, expired,
            or its subject is no longer a registered customer
    """
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    try:
        username = get_subject(credentials.credentials)
    except InvalidTokenError:
        raise UnauthorizedException("Invalid authentication token")

    if store.select_customer_by_email(username) is None:
        raise UnauthorizedException("Customer not found")

    return username
