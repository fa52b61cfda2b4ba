"""
Exception handlers.

Every error leaves the API in the same envelope:
    {"path", "error", "status_code", "timestamp", "correlation_id", "details"?}
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from customer_api.lib.exceptions import AppException
from customer_api.lib.logging import get_logger, log_with_context
from customer_api.lib.request_context import get_correlation_id, get_request_path

logger = get_logger(__name__)


def _error_response(
    request: Request,
    status_code: int,
    message: Any,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = {
        "path": get_request_path(request),
        "error": message,
        "status_code": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "correlation_id": get_correlation_id(request) or "unknown",
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handler for custom application exceptions.

    Client errors are logged as warnings, server errors as errors.
    """
    log_level = logging.WARNING if exc.status_code < 500 else logging.ERROR
    log_with_context(
        logger,
        logging.getLevelName(log_level),
        f"Application error: {exc.message}",
        status_code=exc.status_code,
        path=request.url.path,
        method=request.method,
    )

    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return _error_response(request, exc.status_code, exc.message, exc.details, headers)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handler for Pydantic validation errors.

    Formats validation errors in a consistent way.
    """
    errors = [
        {
            "loc": list(error["loc"]),
            "msg": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    log_with_context(
        logger,
        "warning",
        "Validation error",
        path=request.url.path,
        method=request.method,
        errors=errors,
    )

    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        {"errors": errors},
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handler for Starlette HTTP exceptions (404 routes, 401 from security schemes, ...)."""
    log_with_context(
        logger,
        "warning",
        f"HTTP exception: {exc.detail}",
        status_code=exc.status_code,
        path=request.url.path,
        method=request.method,
    )

    return _error_response(
        request,
        exc.status_code,
        exc.detail,
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for unhandled exceptions.

    Logs full stack trace and returns generic error message.
    """
    logger.error(
        f"Unhandled exception: {exc}",
        exc_info=exc,
    )

    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
    )
