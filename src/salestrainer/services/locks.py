"""Per-session serialization of conversation and completion."""

import asyncio
import weakref
from uuid import UUID


class SessionLocks:
    """
    One asyncio.Lock per training session.

    Locks are held weakly: an entry disappears once no task holds or waits
    on it, so the registry does not grow with the number of sessions.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, session_id: UUID | str) -> asyncio.Lock:
        key = str(session_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
