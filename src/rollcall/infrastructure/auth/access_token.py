"""Opaque session credential.

Credentials are random 256-bit bearer strings issued at signup and handed
to the client in a cookie. Only their SHA-256 digest is stored. The
``AccessToken`` wrapper keeps the raw value out of logs: string
conversion, repr and formatting all render ``<redacted>``.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

REDACTED = "<redacted>"

TOKEN_BYTES = 32


def hash_token(raw: str) -> str:
    """Hash a raw credential for storage and lookup.

    Args:
        raw: The raw credential string.

    Returns:
        SHA-256 hex digest of the credential.
    """
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


class AccessToken:
    """Redacted wrapper around a raw session credential."""

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError("AccessToken value must be a string")
        self._value = value

    @classmethod
    def generate(cls) -> AccessToken:
        """Create a new random credential (64 hex characters)."""
        return cls(secrets.token_hex(TOKEN_BYTES))

    @classmethod
    def from_cookie(cls, value: str | None) -> AccessToken | None:
        """Wrap a cookie value, treating a missing or blank cookie as absent."""
        if value is None or not value.strip():
            return None
        return cls(value.strip())

    def reveal(self) -> str:
        """Return the raw value. Only the code that sets the cookie needs this."""
        return self._value

    def digest(self) -> str:
        """SHA-256 hex digest of the credential, the only form that is stored."""
        return hash_token(self._value)

    def matches(self, stored_hash: str) -> bool:
        """Compare against a stored digest in constant time."""
        return hmac.compare_digest(self.digest(), stored_hash)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AccessToken):
            return NotImplemented
        return hmac.compare_digest(self._value.encode("utf-8"), other._value.encode("utf-8"))

    def __hash__(self) -> int:
        return hash(self.digest())

    def __str__(self) -> str:
        return REDACTED

    def __repr__(self) -> str:
        return f"AccessToken({REDACTED})"

    def __format__(self, format_spec: str) -> str:
        return REDACTED

    def __reduce__(self):
        raise TypeError("AccessToken cannot be pickled")
