"""Sequential ID allocation: next id is ``MAX(id) + 1``, or 1 for an empty table.

The read is not locked; callers that need the allocated id to stay free until
their insert lands must serialize allocate+insert themselves (see
``RecordService``).
"""

from school_api.enums import RecordType
from school_api.store import RecordStore

__all__ = ["SequentialIdAllocator"]


class SequentialIdAllocator:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def next_id(self, record_type: RecordType) -> int:
        last_id = await self._store.max_id(record_type)
        return (last_id or 0) + 1
