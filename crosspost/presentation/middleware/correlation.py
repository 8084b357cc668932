"""
Request context middleware.

Every request gets a correlation ID (taken from X-Request-ID or generated)
and is tagged with its tenant, so the per-platform publish logs of one
request can be followed end to end.
"""

from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ...infrastructure.logging import set_correlation_id

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"
TENANT_HEADER = "X-Tenant-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Binds correlation ID and tenant to the structlog context of a request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        set_correlation_id(request_id)

        with structlog.contextvars.bound_contextvars(
            correlation_id=request_id,
            tenant_id=request.headers.get(TENANT_HEADER) or "default",
            method=request.method,
            path=request.url.path,
        ):
            response = await call_next(request)
            logger.info("Request handled", status_code=response.status_code)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
