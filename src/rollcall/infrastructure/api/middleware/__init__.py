"""HTTP middleware: request context, rate limiting and security headers."""

from rollcall.infrastructure.api.middleware.context_middleware import ContextMiddleware
from rollcall.infrastructure.api.middleware.rate_limit_middleware import (
    RateLimitMiddleware,
)
from rollcall.infrastructure.api.middleware.rate_limit_storage import (
    RateLimitResult,
    RateLimitStorage,
)
from rollcall.infrastructure.api.middleware.security_headers_middleware import (
    SecurityHeadersMiddleware,
)

__all__ = [
    "ContextMiddleware",
    "RateLimitMiddleware",
    "RateLimitResult",
    "RateLimitStorage",
    "SecurityHeadersMiddleware",
]
