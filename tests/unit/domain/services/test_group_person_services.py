"""Unit tests for GroupService and PersonService ownership rules."""

from datetime import date

import pytest

from rollcall.domain.entities.principal import SYSTEM, UserPrincipal
from rollcall.domain.exceptions import GroupNotFound, PersonNotFound, Unauthorized
from rollcall.domain.services.account_service import AccountService
from rollcall.domain.services.group_service import GroupService
from rollcall.domain.services.person_service import PersonService
from rollcall.infrastructure.persistence.models import GroupModel, PersonModel


async def make_principal(session, email: str) -> UserPrincipal:
    user, _ = await AccountService(session).create_user(email)
    return UserPrincipal(user_id=user.id, account_id=user.account_id)


@pytest.mark.asyncio
async def test_group_is_owned_by_creator_account(db_session):
    alice = await make_principal(db_session, "alice@example.com")

    group = await GroupService(db_session).create_group(alice, "Book club")

    assert group.owner_id == alice.account_id
    assert group.name == "Book club"


@pytest.mark.asyncio
async def test_system_principal_cannot_create_group(db_session):
    with pytest.raises(Unauthorized):
        await GroupService(db_session).create_group(SYSTEM, "Orphans")


@pytest.mark.asyncio
async def test_rename_by_other_account_is_unauthorized(db_session):
    alice = await make_principal(db_session, "alice@example.com")
    bob = await make_principal(db_session, "bob@example.com")
    service = GroupService(db_session)
    group = await service.create_group(alice, "Alice's group")

    with pytest.raises(Unauthorized):
        await service.rename_group(bob, group.id, "Bob's now")

    assert (await service.get_group(alice, group.id)).name == "Alice's group"


@pytest.mark.asyncio
async def test_rename_missing_group_is_not_found(db_session):
    alice = await make_principal(db_session, "alice@example.com")

    with pytest.raises(GroupNotFound) as exc_info:
        await GroupService(db_session).rename_group(alice, 12345, "New")

    assert exc_info.value.to_body() == {"_tag": "GroupNotFound", "id": 12345}


@pytest.mark.asyncio
async def test_list_groups_only_returns_own(db_session):
    alice = await make_principal(db_session, "alice@example.com")
    bob = await make_principal(db_session, "bob@example.com")
    service = GroupService(db_session)
    await service.create_group(alice, "A1")
    await service.create_group(alice, "A2")
    await service.create_group(bob, "B1")

    names = [g.name for g in await service.list_groups(alice)]

    assert names == ["A1", "A2"]


@pytest.mark.asyncio
async def test_person_under_missing_group_is_group_not_found(db_session):
    alice = await make_principal(db_session, "alice@example.com")

    with pytest.raises(GroupNotFound):
        await PersonService(db_session).create_person(alice, 777, "Ada", "Lovelace")


@pytest.mark.asyncio
async def test_person_under_own_group_is_returned(db_session):
    alice = await make_principal(db_session, "alice@example.com")
    group = await GroupService(db_session).create_group(alice, "Family")
    service = PersonService(db_session)

    person = await service.create_person(
        alice, group.id, "Ada", "Lovelace", date_of_birth=date(1815, 12, 10)
    )
    fetched = await service.get_person(alice, person.id)

    assert fetched.id == person.id
    assert fetched.group_id == group.id
    assert fetched.date_of_birth == date(1815, 12, 10)


@pytest.mark.asyncio
async def test_person_under_foreign_group_is_unauthorized(db_session):
    alice = await make_principal(db_session, "alice@example.com")
    bob = await make_principal(db_session, "bob@example.com")
    group = await GroupService(db_session).create_group(alice, "Family")
    service = PersonService(db_session)
    person = await service.create_person(alice, group.id, "Ada", "Lovelace")

    with pytest.raises(Unauthorized):
        await service.create_person(bob, group.id, "Eve", "Intruder")
    with pytest.raises(Unauthorized):
        await service.get_person(bob, person.id)
    with pytest.raises(Unauthorized):
        await service.list_people(bob, group.id)


@pytest.mark.asyncio
async def test_missing_person_is_not_found(db_session):
    alice = await make_principal(db_session, "alice@example.com")

    with pytest.raises(PersonNotFound):
        await PersonService(db_session).get_person(alice, 31337)


@pytest.mark.asyncio
async def test_person_with_dangling_group_is_group_not_found(db_session):
    alice = await make_principal(db_session, "alice@example.com")
    # Row whose parent group does not exist (foreign keys are off in this test engine)
    orphan = PersonModel(group_id=999, first_name="Lost", last_name="Soul")
    db_session.add(orphan)
    await db_session.flush()

    with pytest.raises(GroupNotFound):
        await PersonService(db_session).get_person(alice, orphan.id)


@pytest.mark.asyncio
async def test_listings_are_not_truncated(db_session):
    alice = await make_principal(db_session, "alice@example.com")
    db_session.add_all(
        [GroupModel(owner_id=alice.account_id, name=f"Group {i}") for i in range(105)]
    )
    await db_session.flush()

    groups = await GroupService(db_session).list_groups(alice)

    assert len(groups) == 105
    db_session.add_all(
        [PersonModel(group_id=groups[0].id, first_name="Ada", last_name="L") for _ in range(120)]
    )
    await db_session.flush()

    people = await PersonService(db_session).list_people(alice, groups[0].id)

    assert len(people) == 120
