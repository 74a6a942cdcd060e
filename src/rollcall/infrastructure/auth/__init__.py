"""Authentication infrastructure components.

Session credentials: generation, redaction and one-way hashing.
"""

from rollcall.infrastructure.auth.access_token import (
    AccessToken,
    hash_token,
)

__all__ = [
    "AccessToken",
    "hash_token",
]
