"""API route handlers."""

from rollcall.infrastructure.api.routes.groups_router import router as groups_router
from rollcall.infrastructure.api.routes.people_router import router as people_router
from rollcall.infrastructure.api.routes.users_router import router as users_router

__all__ = [
    "groups_router",
    "people_router",
    "users_router",
]
