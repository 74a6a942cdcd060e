"""Security headers middleware for Rollcall.

Adds browser security headers to every response, errors included, and
strips headers that advertise the server stack.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from rollcall.core.config import get_settings

STRIPPED_HEADERS = ("x-powered-by",)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking attacks
    - X-XSS-Protection: Enables browser XSS protection
    - Strict-Transport-Security: Enforces HTTPS (production only)
    - Content-Security-Policy: Restricts content sources
    - Permissions-Policy: Restricts browser features
    - Referrer-Policy: Controls referrer information
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request and add security headers to the response.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint to call.

        Returns:
            The response with security headers added.
        """
        settings = get_settings()

        response = await call_next(request)

        for name in STRIPPED_HEADERS:
            if name in response.headers:
                del response.headers[name]

        if not settings.security_headers_enabled:
            return response

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"

        if settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={settings.hsts_max_age}; includeSubDomains; preload"
            )

        response.headers["Content-Security-Policy"] = settings.csp_policy
        response.headers["Permissions-Policy"] = settings.permissions_policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
