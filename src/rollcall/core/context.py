"""Request context storage using ContextVars.

Gives code deep inside services (audit logging, rate limiting) access to
the current RequestContext without passing it through every call.
"""

from contextvars import ContextVar
from typing import Optional

from rollcall.domain.entities.principal import Principal
from rollcall.domain.entities.request_context import RequestContext

_current_request_context: ContextVar[Optional[RequestContext]] = ContextVar(
    "current_request_context", default=None
)


def get_current_context() -> Optional[RequestContext]:
    """Get the current request context, or None outside a request."""
    return _current_request_context.get()


def set_current_context(context: RequestContext) -> None:
    """Set the current request context."""
    _current_request_context.set(context)


def attach_principal(principal: Principal) -> None:
    """Record the resolved principal on the current request context."""
    context = _current_request_context.get()
    if context is not None:
        _current_request_context.set(context.with_principal(principal))


def clear_current_context() -> None:
    """Clear the current request context."""
    _current_request_context.set(None)
