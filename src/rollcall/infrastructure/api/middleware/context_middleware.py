"""Middleware for managing request context.

Builds one immutable RequestContext per request and publishes it through a
ContextVar for rate limiting and audit logging. The principal is attached
later, once the route dependency has resolved the session credential.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from rollcall.core.config import get_settings
from rollcall.core.context import clear_current_context, set_current_context
from rollcall.domain.entities.request_context import RequestContext


class ContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set up the RequestContext for every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request and setup context.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint to call.

        Returns:
            The response from the application.
        """
        context = RequestContext.build(
            method=request.method,
            path=request.url.path,
            headers=request.headers,
            cookies=request.cookies,
            peer_host=request.client.host if request.client else None,
            correlation_id=getattr(request.state, "correlation_id", None),
            trusted_proxies=get_settings().trusted_proxies,
        )
        set_current_context(context)

        try:
            return await call_next(request)
        finally:
            clear_current_context()
