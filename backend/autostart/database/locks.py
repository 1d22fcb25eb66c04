"""
Collection-level reader/writer locks.

Locks are in-process and keyed by collection path. Readers share a lock;
a writer waits until every reader has released it.
"""
import asyncio
from enum import Enum


class LockMode(str, Enum):
    """Lock modes for opening a collection."""
    READ = "read"
    WRITE = "write"


class ReadWriteLock:
    """Asyncio reader/writer lock for a single collection."""

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def write_locked(self) -> bool:
        return self._writer

    @property
    def locked(self) -> bool:
        return self._writer or self._readers > 0

    async def acquire(self, mode: LockMode) -> None:
        async with self._cond:
            if mode == LockMode.READ:
                await self._cond.wait_for(lambda: not self._writer)
                self._readers += 1
            else:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
                self._writer = True

    async def release(self, mode: LockMode) -> None:
        async with self._cond:
            if mode == LockMode.READ:
                if self._readers == 0:
                    raise RuntimeError("Read lock released more often than acquired")
                self._readers -= 1
            else:
                if not self._writer:
                    raise RuntimeError("Write lock released without being held")
                self._writer = False
            self._cond.notify_all()


class LockTable:
    """
    Registry of collection locks, one per path.

    An entry lives while some task holds or waits for it and is dropped on
    the last release.
    """

    def __init__(self):
        self._locks: dict[str, ReadWriteLock] = {}
        self._holders: dict[str, int] = {}

    def get(self, path: str) -> ReadWriteLock:
        lock = self._locks.get(path)
        if lock is None:
            lock = ReadWriteLock()
            self._locks[path] = lock
        return lock

    async def acquire(self, path: str, mode: LockMode) -> None:
        lock = self.get(path)
        self._holders[path] = self._holders.get(path, 0) + 1
        try:
            await lock.acquire(mode)
        except BaseException:
            self._forget(path)
            raise

    async def release(self, path: str, mode: LockMode) -> None:
        await self._locks[path].release(mode)
        self._forget(path)

    def _forget(self, path: str) -> None:
        remaining = self._holders.get(path, 0) - 1
        if remaining > 0:
            self._holders[path] = remaining
            return
        self._holders.pop(path, None)
        self._locks.pop(path, None)

    def __len__(self) -> int:
        return len(self._locks)

    def is_locked(self, path: str) -> bool:
        lock = self._locks.get(path)
        return lock is not None and lock.locked
