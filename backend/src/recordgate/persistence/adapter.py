"""Store protocol: the record store contract collections persist through."""

from typing import Any, Protocol, runtime_checkable

from recordgate.validation.types import Query, Record


@runtime_checkable
class Store(Protocol):
    """Interface every record store must implement.

    All operations are coroutines that complete exactly once, with a
    result or an exception. Stores assign the ``_id`` identity on insert.
    """

    name: str

    async def find(self, query: Query | None = None) -> list[Record]: ...

    async def insert(self, item: Record) -> Record: ...

    async def update(self, query: Query, item: Record) -> Record | None: ...

    async def remove(self, query: Query) -> None: ...


@runtime_checkable
class StoreFactory(Protocol):
    """Creates the store backing a named collection."""

    def create_store(self, name: str) -> Store: ...

    def close(self) -> None: ...


def record_matches(record: dict[str, Any], query: Query | None) -> bool:
    """Plain field-equality matching shared by the bundled stores."""
    if not query:
        return True
    return all(record.get(key) == value for key, value in query.items())
