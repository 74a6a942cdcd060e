"""Domain entities for Rollcall.

Entities are plain dataclasses with no dependencies on infrastructure or
external frameworks.
"""

from rollcall.domain.entities.principal import (
    SYSTEM,
    Principal,
    SystemPrincipal,
    UserPrincipal,
)
from rollcall.domain.entities.request_context import RequestContext

__all__ = [
    "SYSTEM",
    "Principal",
    "RequestContext",
    "SystemPrincipal",
    "UserPrincipal",
]
