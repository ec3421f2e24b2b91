import asyncio
import weakref
from contextlib import asynccontextmanager
from typing import AsyncIterator


class AccountLocks:
    """
    Per-account asyncio locks.

    Every balance or farming-window mutation runs while holding the lock of
    the account it touches. Locks live only while somebody holds or waits
    for them.
    """

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, account_id: int) -> asyncio.Lock:
        lock = self._locks.get(account_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[account_id] = lock
        return lock

    @asynccontextmanager
    async def hold(self, *account_ids: int) -> AsyncIterator[None]:
        # ascending order so two multi-account operations never deadlock
        locks = [self._lock_for(account_id) for account_id in sorted(set(account_ids))]
        acquired = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


account_locks = AccountLocks()
