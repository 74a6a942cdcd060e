"""Integration tests for the audit trail written by API operations."""

import json

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from rollcall.core.config import Settings
from rollcall.infrastructure.persistence.models import AuditLogModel


def as_user(token: str) -> dict[str, str]:
    return {"Cookie": f"token={token}"}


async def trail(session) -> list[AuditLogModel]:
    result = await session.execute(select(AuditLogModel).order_by(AuditLogModel.id))
    return list(result.scalars().all())


@pytest.mark.asyncio
async def test_operations_are_audited_with_request_metadata(
    client: AsyncClient, signup, db_session, monkeypatch
):
    # The test transport connects from 127.0.0.1; trust it as the proxy
    proxy_settings = Settings(_env_file=None, trusted_proxies=["127.0.0.1"])
    monkeypatch.setattr(
        "rollcall.infrastructure.api.middleware.context_middleware.get_settings",
        lambda: proxy_settings,
    )
    user, token = await signup("alice@example.com")
    group = (
        await client.post(
            "/groups",
            json={"name": "Team"},
            headers={
                **as_user(token),
                "User-Agent": "audit-test",
                "X-Forwarded-For": "198.51.100.20",
                "X-Correlation-ID": "cid_audit000001",
            },
        )
    ).json()

    entries = await trail(db_session)
    group_entry = [e for e in entries if e.entity == "groups"][0]

    assert [(e.action, e.entity) for e in entries] == [
        ("CREATE", "accounts"),
        ("CREATE", "users"),
        ("CREATE", "groups"),
    ]
    assert group_entry.entity_id == group["id"]
    assert group_entry.user_id == user["id"]
    assert group_entry.account_id == user["accountId"]
    assert group_entry.ip_address == "198.51.100.20"
    assert group_entry.user_agent == "audit-test"
    assert group_entry.request_id == "cid_audit000001"


@pytest.mark.asyncio
async def test_person_read_is_audited(client: AsyncClient, signup, db_session):
    _, token = await signup("alice@example.com")
    group = (await client.post("/groups", json={"name": "Team"}, headers=as_user(token))).json()
    person = (
        await client.post(
            f"/groups/{group['id']}/people",
            json={"firstName": "Ada", "lastName": "Lovelace"},
            headers=as_user(token),
        )
    ).json()

    await client.get(f"/people/{person['id']}", headers=as_user(token))

    reads = [e for e in await trail(db_session) if e.action == "READ"]
    assert len(reads) == 1
    assert reads[0].entity == "people"
    assert reads[0].entity_id == person["id"]


@pytest.mark.asyncio
async def test_audit_never_contains_credential(client: AsyncClient, signup, db_session):
    user, token = await signup("alice@example.com")
    await client.patch(
        f"/users/{user['id']}", json={"email": "alice2@example.com"}, headers=as_user(token)
    )

    for entry in await trail(db_session):
        for blob in (entry.old_values, entry.new_values):
            if blob:
                assert "access_token_hash" not in json.loads(blob)
                assert token not in blob
