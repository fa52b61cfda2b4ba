"""
API middleware module.
"""
from customer_api.api.middleware.correlation import CorrelationIdMiddleware
from customer_api.api.middleware.error_handler import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)

__all__ = [
    "CorrelationIdMiddleware",
    "app_exception_handler",
    "validation_exception_handler",
    "http_exception_handler",
    "unhandled_exception_handler",
]
