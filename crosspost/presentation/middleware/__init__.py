from .correlation import CorrelationIdMiddleware
from .request_validation import (
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

__all__ = [
    "CorrelationIdMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
]
