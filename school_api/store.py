"""Record store: parameterized statements against the student and teacher tables.

Every statement goes through ``_run``, which turns any ``SQLAlchemyError`` into a
``StoreError`` carrying a ``StoreErrorKind`` and rolls the session back so it
stays usable.

Transaction modes
=================
::
    autocommit=True    each write is committed on its own
                       (partial progress survives a later failure)

    autocommit=False   caller owns the transaction and calls
                       commit() / rollback() around a compound operation

Functions map one-to-one onto SQL::

    list_all        SELECT * FROM <table>
    max_id          SELECT MAX(id) FROM <table>
    insert          INSERT INTO <table> (id, ...) VALUES (...)
    delete_by_id    DELETE FROM <table> WHERE id = ?
    ids_ascending   SELECT id FROM <table> ORDER BY id
    update_id       UPDATE <table> SET id = ? WHERE id = ?
"""

import logging
from typing import Any

from sqlalchemy import Table, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.enums import RecordType
from school_api.exceptions import StoreError, classify_store_error
from school_api.models import model_for

__all__ = ["RecordStore"]

logger = logging.getLogger(__name__)


def _table(record_type: RecordType) -> Table:
    return model_for(record_type).__table__


class RecordStore:
    """Executes statements for one request on one session."""

    def __init__(self, session: AsyncSession, *, autocommit: bool = True) -> None:
        self._session = session
        self._autocommit = autocommit

    async def list_all(self, record_type: RecordType) -> list[dict[str, Any]]:
        result = await self._run(select(_table(record_type)), record_type)
        return [dict(row) for row in result.mappings().all()]

    async def max_id(self, record_type: RecordType) -> int | None:
        table = _table(record_type)
        result = await self._run(select(func.max(table.c.id)), record_type)
        return result.scalar_one_or_none()

    async def insert(self, record_type: RecordType, record_id: int, fields: dict[str, Any]) -> None:
        values = {**fields, "id": record_id}
        await self._write(insert(_table(record_type)).values(values), record_type)

    async def delete_by_id(self, record_type: RecordType, record_id: int) -> int:
        table = _table(record_type)
        return await self._write(delete(table).where(table.c.id == record_id), record_type)

    async def ids_ascending(self, record_type: RecordType) -> list[int]:
        table = _table(record_type)
        result = await self._run(select(table.c.id).order_by(table.c.id), record_type)
        return list(result.scalars().all())

    async def update_id(self, record_type: RecordType, old_id: int, new_id: int) -> None:
        table = _table(record_type)
        await self._write(update(table).where(table.c.id == old_id).values(id=new_id), record_type)

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StoreError(classify_store_error(exc), f"commit failed: {exc}") from exc

    async def rollback(self) -> None:
        await self._session.rollback()

    async def _write(self, statement, record_type: RecordType) -> int:
        """Execute a DML statement and return the affected row count."""
        result = await self._run(statement, record_type)
        rowcount = result.rowcount or 0
        if self._autocommit:
            await self.commit()
        return rowcount

    async def _run(self, statement, record_type: RecordType):
        try:
            return await self._session.execute(statement)
        except SQLAlchemyError as exc:
            await self._session.rollback()
            kind = classify_store_error(exc)
            logger.debug("Statement on %s failed (%s): %s", record_type.value, kind.value, exc)
            raise StoreError(kind, f"{record_type.value} statement failed: {exc}") from exc
