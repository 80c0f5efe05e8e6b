"""Per-entity mutual exclusion for mutation sequences."""

from __future__ import annotations

import asyncio
import threading
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)


class EntityLockRegistry:
    """Hands out one lock per remote entity id.

    Locks are created lazily and kept for the lifetime of the registry; the number
    of entities is bounded by the declared configuration. Distinct ids never
    contend. Waiters on the same id are woken in the order they started waiting,
    so mutations against one entity reach the network in acquisition order.

    The registry is owned by a session and its locks belong to that session's
    event loop.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def __contains__(self, entity_id: object) -> bool:
        with self._guard:
            return entity_id in self._locks

    def _lock_for(self, entity_id: str) -> asyncio.Lock:
        with self._guard:
            lock = self._locks.get(entity_id)
            if lock is None:
                lock = self._locks[entity_id] = asyncio.Lock()
            return lock

    async def acquire(self, entity_id: str) -> Callable[[], None]:
        """Wait for the entity's lock and return the function that releases it."""

        if not entity_id:
            raise ValueError("entity id must be non-empty")
        lock = self._lock_for(entity_id)
        if lock.locked():
            log.debug("Waiting for lock on %s", entity_id)
        await lock.acquire()
        released = False

        def release() -> None:
            nonlocal released
            if released:
                return
            released = True
            lock.release()

        return release


__all__ = ["EntityLockRegistry"]
