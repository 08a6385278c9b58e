"""Renumbering compaction for a record table.

After a delete the surviving ids are re-sequenced to ``1..N`` in ascending
order of their current id.

Flow Diagram: compact()
========================
::
    ┌──────────────────┐
    │ SELECT id        │
    │ ORDER BY id      │
    └────────┬─────────┘
             ▼
    ┌──────────────────┐
    │ for i, old_id:   │
    │   UPDATE SET id  │◄──┐
    │   = i + 1        │   │ one statement per row,
    └────────┬─────────┘   │ even when old_id == i + 1
             └─────────────┘

Key Behaviours
===============
- Updates run strictly in ascending order, so each target id is already free
  when no other writer touches the table.
- No-op updates are still issued; N rows always cost N statements.
- An empty table performs zero updates.
- A failure mid-pass propagates; in autocommit mode the rows already
  renumbered stay renumbered.
"""

import logging

from prometheus_client import Counter

from school_api.enums import RecordType
from school_api.store import RecordStore

__all__ = ["RenumberingCompactor", "COMPACTION_UPDATES_TOTAL"]

logger = logging.getLogger(__name__)

COMPACTION_UPDATES_TOTAL = Counter(
    "school_api_compaction_updates_total",
    "UPDATE statements issued while renumbering record ids",
    ["record_type"],
)


class RenumberingCompactor:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def compact(self, record_type: RecordType) -> int:
        """Renumber every surviving row of ``record_type``.

        Returns:
            int: Number of UPDATE statements issued (the surviving row count).
        """
        surviving_ids = await self._store.ids_ascending(record_type)
        for position, old_id in enumerate(surviving_ids):
            await self._store.update_id(record_type, old_id, position + 1)
            COMPACTION_UPDATES_TOTAL.labels(record_type=record_type.value).inc()

        logger.debug("Compacted %s: %d rows renumbered", record_type.value, len(surviving_ids))
        return len(surviving_ids)
