"""In-process store with the same commit/rollback contract as the SQL backend.

Used with STORE_BACKEND=memory (local dev, tests). Records are kept per table
in plain dicts. A MemorySession stages writes and publishes them to the store
in one step on commit(), so a reader never observes half an operation.
Reads inside a session see that session's own staged writes.
"""

from collections.abc import Iterator
from typing import Any

_MISSING = object()


class MemoryStore:
    def __init__(self) -> None:
        self._tables: dict[str, dict[Any, Any]] = {}

    def table(self, name: str) -> dict[Any, Any]:
        return self._tables.setdefault(name, {})

    def session(self) -> "MemorySession":
        return MemorySession(self)


class MemorySession:
    def __init__(self, store: MemoryStore) -> None:
        self._store = store
        self._pending: dict[str, dict[Any, Any]] = {}

    async def __aenter__(self) -> "MemorySession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def get(self, table: str, key: Any, default: Any = None) -> Any:
        staged = self._pending.get(table, {}).get(key, _MISSING)
        if staged is not _MISSING:
            return staged
        return self._store.table(table).get(key, default)

    def put(self, table: str, key: Any, value: Any) -> None:
        self._pending.setdefault(table, {})[key] = value

    def scan(self, table: str) -> Iterator[Any]:
        merged = dict(self._store.table(table))
        merged.update(self._pending.get(table, {}))
        return iter(list(merged.values()))

    @property
    def has_pending(self) -> bool:
        return any(self._pending.values())

    async def commit(self) -> None:
        for name, rows in self._pending.items():
            self._store.table(name).update(rows)
        self._pending = {}

    async def rollback(self) -> None:
        self._pending = {}

    async def close(self) -> None:
        # Uncommitted writes are discarded, matching AsyncSession.close().
        self._pending = {}


_store: MemoryStore | None = None


def get_memory_store() -> MemoryStore:
    global _store  # noqa: PLW0603
    if _store is None:
        _store = MemoryStore()
    return _store


def reset_memory_store() -> MemoryStore:
    """Replace the process-wide store with an empty one (tests, local resets)."""
    global _store  # noqa: PLW0603
    _store = MemoryStore()
    return _store
