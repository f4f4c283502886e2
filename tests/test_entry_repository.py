import asyncio
from datetime import datetime, timedelta
from typing import AsyncIterator

import pytest
import pytest_asyncio

from guestbook.core.repositories.entry_repository import EntryRepository
from guestbook.infrastructure.database.adapters.sqlite_connection import DatabaseConnection
from guestbook.infrastructure.database.models.entry import Entry
from guestbook.infrastructure.errors.base import StorageError
from guestbook.utils.enums import ApprovalStateEnum
from guestbook.utils.identifiers import generate_entry_id


CREATED_AT = datetime(2026, 5, 1, 12, 0, 0)


@pytest_asyncio.fixture()
async def db_connection(config) -> AsyncIterator[DatabaseConnection]:
    connection = DatabaseConnection(config.db)
    await connection.create_schema()
    yield connection
    await connection.close()


@pytest_asyncio.fixture()
async def repository(db_connection) -> AsyncIterator[EntryRepository]:
    session = await db_connection.get_session()
    try:
        yield EntryRepository(session=session)
    finally:
        await session.close()


def _entry(ip: str = "192.0.2.1", email: str = "alice@example.com", created_at: datetime = CREATED_AT, **kwargs) -> Entry:
    return Entry(
        id=kwargs.pop("id", generate_entry_id()),
        name=kwargs.pop("name", "Alice Smith"),
        email=email,
        message="Hello there, this is my message.",
        ip=ip,
        comment="",
        created_at=created_at,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_new_entry_defaults_to_pending(repository):
    entry = await repository.add_entry(_entry())

    stored = await repository.get_entry(entry.id)
    assert stored.approved == ApprovalStateEnum.PENDING
    assert stored.comment == ""
    assert stored.created_at == CREATED_AT


@pytest.mark.asyncio
async def test_duplicate_id_is_a_storage_error(repository):
    entry_id = generate_entry_id()
    await repository.add_entry(_entry(id=entry_id))

    with pytest.raises(StorageError):
        await repository.add_entry(_entry(id=entry_id, ip="192.0.2.99"))


@pytest.mark.asyncio
async def test_get_unknown_entry(repository):
    assert await repository.get_entry("missing") is None


@pytest.mark.asyncio
async def test_last_submission_time_per_address(repository):
    assert await repository.get_last_submission_time("192.0.2.1") is None

    await repository.add_entry(_entry(created_at=CREATED_AT))
    await repository.add_entry(_entry(created_at=CREATED_AT + timedelta(minutes=5)))
    await repository.add_entry(_entry(ip="192.0.2.2", created_at=CREATED_AT + timedelta(hours=1)))

    assert await repository.get_last_submission_time("192.0.2.1") == CREATED_AT + timedelta(minutes=5)


@pytest.mark.asyncio
async def test_approved_entries_are_projected(repository):
    approved = await repository.add_entry(_entry(name="Approved"))
    await repository.add_entry(_entry(name="Pending", ip="192.0.2.2"))
    rejected = await repository.add_entry(_entry(name="Rejected", ip="192.0.2.3"))

    await repository.set_approved(approved.id, ApprovalStateEnum.APPROVED)
    await repository.set_approved(rejected.id, ApprovalStateEnum.REJECTED)

    rows = await repository.get_approved_entries()
    assert [row.name for row in rows] == ["Approved"]
    assert set(rows[0]._fields) == {"name", "message", "approved", "comment", "created_at"}


@pytest.mark.asyncio
async def test_set_approved_reports_previous_state(repository):
    entry = await repository.add_entry(_entry())

    first = await repository.set_approved(entry.id, ApprovalStateEnum.APPROVED)
    assert first.previous == ApprovalStateEnum.PENDING
    assert first.email == "alice@example.com"

    second = await repository.set_approved(entry.id, ApprovalStateEnum.APPROVED)
    assert second.previous == ApprovalStateEnum.APPROVED


@pytest.mark.asyncio
async def test_decided_entry_is_not_overwritten(repository):
    entry = await repository.add_entry(_entry())
    await repository.set_approved(entry.id, ApprovalStateEnum.REJECTED)

    change = await repository.set_approved(entry.id, ApprovalStateEnum.APPROVED)
    assert change.previous == ApprovalStateEnum.REJECTED

    await repository.session.refresh(entry)
    assert entry.approved == ApprovalStateEnum.REJECTED


@pytest.mark.asyncio
async def test_set_approved_unknown_id(repository):
    assert await repository.set_approved("missing", ApprovalStateEnum.APPROVED) is None


@pytest.mark.asyncio
async def test_concurrent_approvals_transition_once(db_connection):
    async with await db_connection.get_session() as session:
        entry = await EntryRepository(session).add_entry(_entry())

    async def approve():
        async with await db_connection.get_session() as session:
            return await EntryRepository(session).set_approved(entry.id, ApprovalStateEnum.APPROVED)

    changes = await asyncio.gather(*(approve() for _ in range(5)))
    previous_states = [change.previous for change in changes]
    assert previous_states.count(ApprovalStateEnum.PENDING) == 1


@pytest.mark.asyncio
async def test_set_comment_first_and_later(repository):
    entry = await repository.add_entry(_entry())

    first = await repository.set_comment(entry.id, "Thanks!")
    assert first.first_comment is True
    assert first.email == "alice@example.com"

    second = await repository.set_comment(entry.id, "Edited")
    assert second.first_comment is False

    await repository.session.refresh(entry)
    assert entry.comment == "Edited"


@pytest.mark.asyncio
async def test_set_comment_unknown_id(repository):
    assert await repository.set_comment("missing", "Hello") is None
