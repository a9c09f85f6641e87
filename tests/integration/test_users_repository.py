"""Integration tests for SqlAlchemyUserRepository against SQLite."""

from datetime import timezone

import pytest
from sqlalchemy import select

from identity_api.domain.results import Ok, UserAlreadyExists, UserNotFound
from identity_api.infrastructure.db import models


async def _create(repo, email="alice@example.com", hashed="hash-1"):
    return await repo.create(email, "Alice", "Liddell", hashed)


@pytest.mark.asyncio
async def test_create_and_find(user_repo):
    created = await _create(user_repo)

    assert isinstance(created, Ok)
    user = created.value
    assert user.id is not None
    assert user.email == "alice@example.com"
    assert user.first_name == "Alice"
    assert user.last_name == "Liddell"
    assert user.hashed_password == "hash-1"

    found = await user_repo.find_by_email("alice@example.com")
    assert isinstance(found, Ok)
    assert found.value.id == user.id


@pytest.mark.asyncio
async def test_create_duplicate_email(user_repo):
    first = await _create(user_repo)
    second = await _create(user_repo, hashed="hash-2")

    assert second == UserAlreadyExists("alice@example.com")
    found = await user_repo.find_by_email("alice@example.com")
    assert found.value.id == first.value.id
    assert found.value.hashed_password == "hash-1"
    assert len(await user_repo.all()) == 1


@pytest.mark.asyncio
async def test_unique_index_backstop_reports_conflict(user_repo, monkeypatch):
    await _create(user_repo)

    async def _no_row(session, email, for_update=False):
        return None

    # simulate a racing writer that passed the existence check
    monkeypatch.setattr(user_repo, "_get_row", _no_row)

    assert await _create(user_repo, hashed="hash-2") == UserAlreadyExists("alice@example.com")


@pytest.mark.asyncio
async def test_create_rejects_empty_hash(user_repo):
    with pytest.raises(ValueError):
        await _create(user_repo, hashed="")
    assert await user_repo.exists("alice@example.com") is False


@pytest.mark.asyncio
async def test_email_lookup_is_exact(user_repo):
    await _create(user_repo)

    assert await user_repo.exists("alice@example.com") is True
    assert await user_repo.exists("bob@example.com") is False
    assert await user_repo.find_by_email("Alice@example.com") == UserNotFound("Alice@example.com")


@pytest.mark.asyncio
async def test_timestamps_are_utc(user_repo):
    user = (await _create(user_repo)).value
    found = (await user_repo.find_by_email(user.email)).value

    assert found.created_at.tzinfo is not None
    assert found.created_at.utcoffset() == timezone.utc.utcoffset(None)
    assert found.updated_at >= found.created_at


@pytest.mark.asyncio
async def test_update_password(user_repo):
    before = (await _create(user_repo)).value

    result = await user_repo.update_password("alice@example.com", "hash-2")

    assert isinstance(result, Ok)
    assert result.value.hashed_password == "hash-2"
    assert result.value.id == before.id
    assert result.value.updated_at >= before.updated_at
    found = await user_repo.find_by_email("alice@example.com")
    assert found.value.hashed_password == "hash-2"


@pytest.mark.asyncio
async def test_update_password_unknown_user(user_repo):
    assert await user_repo.update_password("nobody@x.com", "h") == UserNotFound("nobody@x.com")


@pytest.mark.asyncio
async def test_update_email(user_repo):
    before = (await _create(user_repo)).value

    result = await user_repo.update_email("alice@example.com", "carol@example.com")

    assert isinstance(result, Ok)
    assert result.value.id == before.id
    assert await user_repo.exists("alice@example.com") is False
    assert (await user_repo.find_by_email("carol@example.com")).value.id == before.id


@pytest.mark.asyncio
async def test_update_email_to_taken_address_leaves_rows_alone(user_repo):
    alice = (await _create(user_repo)).value
    await _create(user_repo, email="bob@example.com", hashed="hash-b")

    result = await user_repo.update_email("alice@example.com", "bob@example.com")

    assert result == UserAlreadyExists("bob@example.com")
    assert (await user_repo.find_by_email("alice@example.com")).value.id == alice.id
    assert (await user_repo.find_by_email("bob@example.com")).value.hashed_password == "hash-b"


@pytest.mark.asyncio
async def test_update_email_unknown_user(user_repo):
    assert await user_repo.update_email("nobody@x.com", "n@x.com") == UserNotFound("nobody@x.com")


@pytest.mark.asyncio
async def test_delete_returns_removed_user(user_repo, database):
    created = (await _create(user_repo)).value

    result = await user_repo.delete_by_email("alice@example.com")

    assert isinstance(result, Ok)
    assert result.value.id == created.id
    assert result.value.email == "alice@example.com"
    assert await user_repo.find_by_email("alice@example.com") == UserNotFound("alice@example.com")

    async with database.session_factory() as session:
        rows = (await session.execute(select(models.UserModel))).scalars().all()
    assert rows == []


@pytest.mark.asyncio
async def test_delete_unknown_user(user_repo):
    assert await user_repo.delete_by_email("nobody@x.com") == UserNotFound("nobody@x.com")


@pytest.mark.asyncio
async def test_all(user_repo):
    assert await user_repo.all() == []
    await _create(user_repo)
    await _create(user_repo, email="bob@example.com")

    emails = sorted(u.email for u in await user_repo.all())
    assert emails == ["alice@example.com", "bob@example.com"]
