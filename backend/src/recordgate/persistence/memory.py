"""In-memory record store, for tests and throwaway deployments."""

import copy
import uuid

from recordgate.persistence.adapter import record_matches
from recordgate.validation.types import IDENTITY_FIELD, Query, Record


class MemoryStore:
    """Dict-backed store. Records are deep-copied in and out."""

    def __init__(self, name: str = ""):
        self.name = name
        self._records: dict[str, Record] = {}

    def _matching(self, query: Query | None) -> list[Record]:
        return [r for r in self._records.values() if record_matches(r, query)]

    async def find(self, query: Query | None = None) -> list[Record]:
        return [copy.deepcopy(r) for r in self._matching(query)]

    async def insert(self, item: Record) -> Record:
        record = copy.deepcopy(item)
        record[IDENTITY_FIELD] = record.get(IDENTITY_FIELD) or uuid.uuid4().hex
        self._records[record[IDENTITY_FIELD]] = record
        return copy.deepcopy(record)

    async def update(self, query: Query, item: Record) -> Record | None:
        """Merge ``item`` into every matching record.

        Returns the first updated record, or None when nothing matched.
        """
        changes = {k: v for k, v in copy.deepcopy(item).items() if k != IDENTITY_FIELD}
        matched = self._matching(query)
        for record in matched:
            record.update(changes)
        return copy.deepcopy(matched[0]) if matched else None

    async def remove(self, query: Query) -> None:
        for record in self._matching(query):
            del self._records[record[IDENTITY_FIELD]]


class MemoryStoreFactory:
    """Hands out one MemoryStore per collection name."""

    def __init__(self) -> None:
        self._stores: dict[str, MemoryStore] = {}

    def create_store(self, name: str) -> MemoryStore:
        if name not in self._stores:
            self._stores[name] = MemoryStore(name)
        return self._stores[name]

    def close(self) -> None:
        self._stores.clear()
