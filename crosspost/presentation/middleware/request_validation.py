"""Request validation middleware.

Oversized bodies are refused before they are parsed. Responses carry
security headers, and API responses (which may echo credential state) are
never cached.
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()

DEFAULT_MAX_BODY = 1024 * 1024

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

NO_STORE_HEADERS = {"Cache-Control": "no-store", "Pragma": "no-cache"}

# Interactive docs load scripts and styles
DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Answers 413 when the declared Content-Length exceeds ``max_size``."""

    def __init__(self, app, max_size: int = DEFAULT_MAX_BODY) -> None:
        super().__init__(app)
        self._max_size = max_size

    async def dispatch(self, request: Request, call_next) -> Response:
        declared = request.headers.get("content-length")
        if declared is None:
            return await call_next(request)

        if not declared.isdigit():
            logger.warning("Rejected request with bad Content-Length", value=declared)
            return JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})

        if int(declared) > self._max_size:
            logger.warning(
                "Rejected oversized request",
                content_length=int(declared),
                limit=self._max_size,
            )
            return JSONResponse(
                status_code=413,
                content={"error": f"Request body exceeds {self._max_size} bytes"},
            )

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers to responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        path = request.url.path

        for name, value in SECURITY_HEADERS.items():
            if name == "Content-Security-Policy" and path.startswith(DOCS_PATHS):
                continue
            response.headers[name] = value

        if path.startswith("/api/"):
            response.headers.update(NO_STORE_HEADERS)

        return response
