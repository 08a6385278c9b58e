"""Business logic for listing, creating and deleting student and teacher records.

The service is built per request from a ``RequestContext`` and wires the
record store, the sequential id allocator and the renumbering compactor
together.

Flow Diagram: Create
=====================
::
    ┌─────────────┐     ┌─────────────┐     ┌─────────────┐
    │ table lock  │────►│ next_id()   │────►│ INSERT row  │──► commit
    │ (if serial) │     │ MAX(id) + 1 │     │ id = next   │
    └─────────────┘     └─────────────┘     └─────────────┘

Flow Diagram: Delete
=====================
::
    ┌─────────────┐     ┌─────────────┐     ┌─────────────┐
    │ table lock  │────►│ DELETE row  │────►│ compact()   │──► commit
    │ (if serial) │     │ (0 or 1)    │     │ ids = 1..N  │
    └─────────────┘     └─────────────┘     └─────────────┘

Key Behaviours
===============
- With SERIALIZE_MUTATIONS the compound operation holds the per-table lock
  and runs as one transaction; any failure rolls the whole of it back.
- Without it every statement commits on its own, so concurrent creates can
  collide on the same id and a failed compaction leaves partial progress.
- Deleting an id that does not exist still compacts and still succeeds.
- Store failures surface as ``StoreError``; the routes map them to responses.
"""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from prometheus_client import Counter, Histogram

from school_api.allocator import SequentialIdAllocator
from school_api.compactor import RenumberingCompactor
from school_api.enums import RecordOperation, RecordType, RequestStatus
from school_api.exceptions import StoreError
from school_api.store import RecordStore

if TYPE_CHECKING:
    from school_api.dependencies import RequestContext

__all__ = ["RecordService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

RECORD_OPERATIONS_TOTAL = Counter(
    "school_api_record_operations_total",
    "Record operations handled by the API",
    ["record_type", "operation", "status"],
)
RECORD_OPERATION_DURATION = Histogram(
    "school_api_record_operation_duration_seconds",
    "Time taken by record operations",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)
STORE_ERRORS_TOTAL = Counter(
    "school_api_store_errors_total",
    "Record store failures by kind",
    ["kind"],
)


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================


class RecordService:
    """List, create and delete records of either type.

    Example:
        >>> service = RecordService.from_context(ctx)
        >>> new_id = await service.create(RecordType.STUDENT, payload.to_columns())
        >>> await service.delete(RecordType.STUDENT, new_id)
    """

    def __init__(self, ctx: "RequestContext"):
        self._settings = ctx.settings
        self._logger = ctx.logger
        self._locks = ctx.table_locks
        self._serialize = self._settings.SERIALIZE_MUTATIONS
        self._store = RecordStore(ctx.database, autocommit=not self._serialize)
        self._allocator = SequentialIdAllocator(self._store)
        self._compactor = RenumberingCompactor(self._store)

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "RecordService":
        return cls(ctx)

    # ========================================================================
    # PUBLIC API METHODS
    # ========================================================================

    async def list_records(self, record_type: RecordType) -> list[dict[str, Any]]:
        async with self._observe(record_type, RecordOperation.LIST):
            rows = await self._store.list_all(record_type)
        self._logger.debug(f"Listed {len(rows)} {record_type.plural}")
        return rows

    async def create(self, record_type: RecordType, columns: dict[str, Any]) -> int:
        """Allocate the next id and insert the row.

        Returns:
            int: The id assigned to the new row.

        Raises:
            StoreError: On duplicate id (concurrent create) or any other store failure.
        """
        async with self._observe(record_type, RecordOperation.CREATE):
            async with self._mutation(record_type):
                record_id = await self._allocator.next_id(record_type)
                await self._store.insert(record_type, record_id, columns)

        self._logger.info(f"{record_type.label} {record_id} added")
        return record_id

    async def delete(self, record_type: RecordType, record_id: int) -> int:
        """Delete the row (if any) and renumber the survivors.

        Returns:
            int: Rows removed by the delete itself, 0 or 1.

        Raises:
            StoreError: If the delete or any renumbering update fails.
        """
        async with self._observe(record_type, RecordOperation.DELETE):
            async with self._mutation(record_type):
                removed = await self._store.delete_by_id(record_type, record_id)
                renumbered = await self._compactor.compact(record_type)

        if removed == 0:
            self._logger.info(f"{record_type.label} {record_id} not found, compacted {renumbered} rows anyway")
        else:
            self._logger.info(f"{record_type.label} {record_id} deleted, {renumbered} rows renumbered")
        return removed

    # ========================================================================
    # PRIVATE HELPER METHODS
    # ========================================================================

    @asynccontextmanager
    async def _mutation(self, record_type: RecordType) -> AsyncIterator[None]:
        """Serialize a compound mutation on ``record_type`` when enabled."""
        if not self._serialize:
            yield
            return

        async with self._locks.for_type(record_type):
            try:
                yield
                await self._store.commit()
            except BaseException:
                await self._store.rollback()
                raise

    @asynccontextmanager
    async def _observe(self, record_type: RecordType, operation: RecordOperation) -> AsyncIterator[None]:
        start_time = time.perf_counter()
        try:
            yield
        except StoreError as exc:
            STORE_ERRORS_TOTAL.labels(kind=exc.kind.value).inc()
            RECORD_OPERATIONS_TOTAL.labels(
                record_type=record_type.value, operation=operation.value, status=RequestStatus.ERROR.value
            ).inc()
            self._logger.error(f"{operation.value} {record_type.value} failed: {exc}")
            raise
        else:
            RECORD_OPERATIONS_TOTAL.labels(
                record_type=record_type.value, operation=operation.value, status=RequestStatus.SUCCESS.value
            ).inc()
        finally:
            RECORD_OPERATION_DURATION.labels(operation=operation.value).observe(time.perf_counter() - start_time)
