"""Renumbering compactor tests."""

from unittest.mock import AsyncMock, call

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.compactor import RenumberingCompactor
from school_api.enums import RecordType, StoreErrorKind
from school_api.exceptions import StoreError
from school_api.store import RecordStore


async def _seed(store: RecordStore, ids: list[int]) -> None:
    for record_id in ids:
        await store.insert(
            RecordType.STUDENT,
            record_id,
            {"name": f"student-{record_id}", "roll_number": f"R{record_id}", "class": "5A"},
        )


@pytest.mark.asyncio
async def test_compact_empty_table(db_session: AsyncSession) -> None:
    compactor = RenumberingCompactor(RecordStore(db_session))
    assert await compactor.compact(RecordType.STUDENT) == 0


@pytest.mark.asyncio
async def test_compact_closes_gaps_in_order(db_session: AsyncSession) -> None:
    store = RecordStore(db_session)
    await _seed(store, [2, 5, 9])

    assert await RenumberingCompactor(store).compact(RecordType.STUDENT) == 3

    rows = sorted(await store.list_all(RecordType.STUDENT), key=lambda row: row["id"])
    assert [(row["id"], row["name"]) for row in rows] == [
        (1, "student-2"),
        (2, "student-5"),
        (3, "student-9"),
    ]


@pytest.mark.asyncio
async def test_compact_dense_table_keeps_content(db_session: AsyncSession) -> None:
    store = RecordStore(db_session)
    await _seed(store, [1, 2, 3])
    before = sorted(await store.list_all(RecordType.STUDENT), key=lambda row: row["id"])

    # Redundant writes are still issued, one per row.
    assert await RenumberingCompactor(store).compact(RecordType.STUDENT) == 3

    after = sorted(await store.list_all(RecordType.STUDENT), key=lambda row: row["id"])
    assert after == before


@pytest.mark.asyncio
async def test_compact_issues_one_update_per_row() -> None:
    store = AsyncMock(spec=RecordStore)
    store.ids_ascending.return_value = [1, 3, 4]

    await RenumberingCompactor(store).compact(RecordType.TEACHER)

    assert store.update_id.await_args_list == [
        call(RecordType.TEACHER, 1, 1),
        call(RecordType.TEACHER, 3, 2),
        call(RecordType.TEACHER, 4, 3),
    ]


@pytest.mark.asyncio
async def test_compact_failure_midway_propagates() -> None:
    store = AsyncMock(spec=RecordStore)
    store.ids_ascending.return_value = [2, 3, 4]
    store.update_id.side_effect = [None, StoreError(StoreErrorKind.CONNECTIVITY, "lost"), None]

    with pytest.raises(StoreError):
        await RenumberingCompactor(store).compact(RecordType.STUDENT)

    # The first update already went out; the third never did.
    assert store.update_id.await_count == 2
