"""
Correlation ID middleware for request tracing.
"""
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from customer_api.lib.logging import get_logger, log_with_context, set_correlation_id

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Adds a correlation_id to every request.
    Accepts X-Correlation-ID from incoming requests or generates a new one.
    """

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())

        # Available to handlers via request.state and to log records via the context var
        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)

        log_with_context(
            logger,
            "info",
            "Incoming request",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        response = await call_next(request)

        response.headers[CORRELATION_ID_HEADER] = correlation_id

        log_with_context(
            logger,
            "info",
            "Response sent",
            status_code=response.status_code,
        )

        return response
