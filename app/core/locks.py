"""
Per-key mutual exclusion for pick writes.

Writes for the same (user_id, game_id) run one at a time; different keys
never wait on each other. Entries are dropped once nobody holds or waits
on them, so the registry only grows with in-flight keys.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Hashable


class KeyedLock:
    def __init__(self):
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable):
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._waiters[key] = self._waiters.get(key, 0) + 1

        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


def pick_key(user_id: str, game_id: int) -> str:
    """Composite key for a user's pick on a game, also the pick document _id."""
    return f"{user_id}:{game_id}"


# Shared by every service instance in the process
pick_locks = KeyedLock()
