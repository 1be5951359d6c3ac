"""Storage gateway against a temporary SQLite database."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from models.sql.suggestion import SuggestionModel
from services.database import StorageGateway, check_record_constraints
from services.errors import PersistenceError


def _record(suffix: str, created_at: datetime | None = None, **overrides) -> SuggestionModel:
    fields = {
        "id": f"id-{suffix}",
        "name": f"User {suffix}",
        "email": f"user{suffix}@example.com",
        "type": "feature",
        "message": f"Suggestion number {suffix}",
        "created_at": created_at or datetime.now(timezone.utc),
    }
    fields.update(overrides)
    return SuggestionModel(**fields)


@pytest.mark.asyncio
async def test_ensure_schema_is_idempotent(gateway):
    await gateway.ensure_schema()
    await gateway.ensure_schema()
    async with gateway.engine.connect() as conn:
        result = await conn.execute(
            text("select count(*) from sqlite_master where type = 'table' and name = 'suggestions'")
        )
        assert result.scalar() == 1


@pytest.mark.asyncio
async def test_insert_then_list(gateway):
    await gateway.insert(_record("a", impact="high", extra="details"))
    rows = await gateway.list_recent(10)
    assert len(rows) == 1
    row = rows[0]
    assert row.id == "id-a"
    assert row.name == "User a"
    assert row.impact == "high"
    assert row.extra == "details"


@pytest.mark.asyncio
async def test_list_recent_newest_first(gateway):
    now = datetime.now(timezone.utc)
    await gateway.insert(_record("a", created_at=now - timedelta(seconds=1)))
    await gateway.insert(_record("b", created_at=now))
    rows = await gateway.list_recent(2)
    assert [row.id for row in rows] == ["id-b", "id-a"]


@pytest.mark.asyncio
async def test_sub_second_ordering_preserved(gateway):
    now = datetime.now(timezone.utc)
    await gateway.insert(_record("late", created_at=now + timedelta(milliseconds=5)))
    await gateway.insert(_record("early", created_at=now))
    rows = await gateway.list_recent(2)
    assert [row.id for row in rows] == ["id-late", "id-early"]


@pytest.mark.asyncio
async def test_list_recent_respects_limit(gateway):
    base = datetime.now(timezone.utc)
    for i in range(5):
        await gateway.insert(_record(str(i), created_at=base + timedelta(seconds=i)))
    rows = await gateway.list_recent(3)
    assert [row.id for row in rows] == ["id-4", "id-3", "id-2"]
    assert await gateway.list_recent(0) == []


@pytest.mark.asyncio
async def test_list_recent_never_exceeds_cap(tmp_path):
    gw = StorageGateway(f"sqlite+aiosqlite:///{tmp_path / 'cap.db'}", max_list_limit=2)
    await gw.ensure_schema()
    try:
        for i in range(4):
            await gw.insert(_record(str(i)))
        assert len(await gw.list_recent(1000)) == 2
    finally:
        await gw.close()


@pytest.mark.asyncio
async def test_duplicate_id_is_persistence_error(gateway):
    await gateway.insert(_record("dup"))
    with pytest.raises(PersistenceError) as exc_info:
        await gateway.insert(_record("dup"))
    assert exc_info.value.operation == "insert"
    assert exc_info.value.status_code == 500
    assert len(await gateway.list_recent(10)) == 1


@pytest.mark.asyncio
async def test_over_length_field_rejected_without_insert(gateway):
    with pytest.raises(PersistenceError):
        await gateway.insert(_record("long", name="x" * 201))
    assert await gateway.list_recent(10) == []


def test_constraint_check_requires_fields():
    with pytest.raises(PersistenceError):
        check_record_constraints(_record("x", message=""))
    check_record_constraints(_record("x", impact="y" * 30))
    with pytest.raises(PersistenceError):
        check_record_constraints(_record("x", impact="y" * 31))


@pytest.mark.asyncio
async def test_query_timeout_maps_to_persistence_error(tmp_path):
    gw = StorageGateway(f"sqlite+aiosqlite:///{tmp_path / 'slow.db'}", query_timeout=0.01)
    try:
        with pytest.raises(PersistenceError) as exc_info:
            await gw._run("slow_query", lambda: asyncio.sleep(1))
        assert exc_info.value.operation == "slow_query"
    finally:
        await gw.close()


@pytest.mark.asyncio
async def test_unreachable_database_is_persistence_error(tmp_path):
    gw = StorageGateway(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'x.db'}")
    try:
        with pytest.raises(PersistenceError):
            await gw.ensure_schema()
    finally:
        await gw.close()
