"""In-process keyed state with per-key update isolation."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

T = TypeVar("T")


class KeyedStore(Generic[T]):
    """A dict of values guarded by one ``asyncio.Lock`` per key.

    Callers that read-modify-write a value wrap the sequence in
    ``async with store.locked(key)``; work on different keys never waits on
    each other. ``get``/``set``/``delete`` themselves do not take the lock, so
    they can be called from inside a ``locked`` block. A key's lock lives only
    while some caller holds or waits for it.
    """

    def __init__(self) -> None:
        self._values: dict[str, T] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def keys(self) -> list[str]:
        return list(self._values)

    def get(self, key: str, default: T | None = None) -> T | None:
        return self._values.get(key, default)

    def set(self, key: str, value: T) -> None:
        self._values[key] = value

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None

    @asynccontextmanager
    async def locked(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users.get(key, 1) - 1
            if remaining:
                self._lock_users[key] = remaining
            else:
                self._lock_users.pop(key, None)
                self._locks.pop(key, None)

    async def sweep(self, should_evict: Callable[[str, T], bool]) -> int:
        """Delete every entry for which ``should_evict(key, value)`` is true.

        Each candidate is re-checked under its own lock, so an entry updated
        concurrently is judged on its latest value.
        """
        evicted = 0
        for key in list(self._values):
            async with self.locked(key):
                value = self._values.get(key)
                if value is not None and should_evict(key, value):
                    del self._values[key]
                    evicted += 1
        return evicted

    def clear(self) -> None:
        self._values.clear()
        self._locks.clear()
        self._lock_users.clear()
