"""Unit tests for SessionResolver.

Uses an in-memory lookup that counts calls so the tests can assert that a
missing credential never reaches the repository.
"""

from dataclasses import dataclass

import pytest

from rollcall.domain.entities.principal import UserPrincipal
from rollcall.domain.exceptions import Unauthorized
from rollcall.domain.services.session_resolver import SessionResolver
from rollcall.infrastructure.auth.access_token import AccessToken


@dataclass
class StoredUser:
    id: int
    account_id: int
    access_token_hash: str


class CountingLookup:
    def __init__(self, users: list[StoredUser] | None = None) -> None:
        self.users = {u.access_token_hash: u for u in users or []}
        self.calls = 0

    async def find_by_access_token_hash(self, token_hash: str):
        self.calls += 1
        return self.users.get(token_hash)


class LyingLookup(CountingLookup):
    """Returns a user whose stored digest does not match the query."""

    async def find_by_access_token_hash(self, token_hash: str):
        self.calls += 1
        return StoredUser(id=1, account_id=1, access_token_hash="0" * 64)


@pytest.mark.asyncio
async def test_missing_credential_makes_no_lookup():
    lookup = CountingLookup()
    resolver = SessionResolver(lookup)

    with pytest.raises(Unauthorized):
        await resolver.resolve_principal(None)

    assert lookup.calls == 0


@pytest.mark.asyncio
async def test_unknown_credential_is_unauthorized():
    lookup = CountingLookup()
    resolver = SessionResolver(lookup)

    with pytest.raises(Unauthorized):
        await resolver.resolve_principal(AccessToken.generate())

    assert lookup.calls == 1


@pytest.mark.asyncio
async def test_mismatched_digest_is_unauthorized():
    resolver = SessionResolver(LyingLookup())

    with pytest.raises(Unauthorized):
        await resolver.resolve_principal(AccessToken.generate())


@pytest.mark.asyncio
async def test_valid_credential_resolves_to_owner_account():
    token = AccessToken.generate()
    other = AccessToken.generate()
    lookup = CountingLookup(
        [
            StoredUser(id=7, account_id=42, access_token_hash=token.digest()),
            StoredUser(id=8, account_id=43, access_token_hash=other.digest()),
        ]
    )
    resolver = SessionResolver(lookup)

    principal = await resolver.resolve_principal(token)

    assert principal == UserPrincipal(user_id=7, account_id=42)
    assert lookup.calls == 1


@pytest.mark.asyncio
async def test_resolution_does_not_mutate_store():
    token = AccessToken.generate()
    stored = StoredUser(id=1, account_id=2, access_token_hash=token.digest())
    lookup = CountingLookup([stored])

    await SessionResolver(lookup).resolve_principal(token)
    await SessionResolver(lookup).resolve_principal(token)

    assert stored == StoredUser(id=1, account_id=2, access_token_hash=token.digest())
