"""
In-memory Progress Repository: process-local adapter.

Used by tests and by callers that ask the factory for in_memory storage.
"""

from retenta.domain.progress.models import ProgressRecord
from retenta.domain.progress.ports import ProgressRepository


class InMemoryProgressRepository(ProgressRepository):
    def __init__(self, records: dict[str, ProgressRecord] | None = None):
        self._records: dict[str, ProgressRecord] = dict(records or {})

    async def get(self, item: str) -> ProgressRecord | None:
        return self._records.get(item)

    async def set(self, item: str, record: ProgressRecord) -> None:
        self._records[item] = record

    async def all(self) -> dict[str, ProgressRecord]:
        return dict(self._records)
