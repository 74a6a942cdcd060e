"""Rate limiting middleware for Rollcall.

Limits the number of requests per client IP within a fixed window.
Endpoint overrides (``"POST /users": (5, 900)``) get their own counter so
a strict signup limit does not eat into the general budget.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from rollcall.core.config import get_settings
from rollcall.core.context import get_current_context
from rollcall.core.logging import get_logger
from rollcall.domain.entities.request_context import DEFAULT_CLIENT_IP
from rollcall.domain.exceptions import RateLimitExceeded
from rollcall.infrastructure.api.middleware.rate_limit_storage import (
    RateLimitResult,
    RateLimitStorage,
)

logger = get_logger(__name__)


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_after),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to enforce rate limits on API requests."""

    def __init__(self, app: ASGIApp, storage: RateLimitStorage) -> None:
        super().__init__(app)
        self.storage = storage

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Count the request and reject it with 429 once over the limit.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint to call.

        Returns:
            The response from the application or a 429 error.
        """
        settings = get_settings()

        if not settings.rate_limit_enabled:
            return await call_next(request)

        # Client IP comes from the context built by ContextMiddleware
        context = get_current_context()
        client_ip = context.client_ip if context else (
            request.client.host if request.client else DEFAULT_CLIENT_IP
        )

        key = f"ip:{client_ip}"
        limit = settings.rate_limit_requests
        window = settings.rate_limit_window_seconds

        endpoint = f"{request.method} {request.url.path}"
        if endpoint in settings.rate_limit_endpoints:
            limit, window = settings.rate_limit_endpoints[endpoint]
            key = f"{key}:{endpoint}"

        result = self.storage.hit(key, limit, window)

        if not result.allowed:
            logger.warning(
                "Rate limit exceeded",
                key=key,
                endpoint=endpoint,
                limit=limit,
                retry_after=result.reset_after,
            )
            error = RateLimitExceeded(result.reset_after)
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_body(),
                headers={
                    "Retry-After": str(result.reset_after),
                    **rate_limit_headers(result),
                },
            )

        response = await call_next(request)
        response.headers.update(rate_limit_headers(result))
        return response
