"""Keep the state store in step with the remote service for one entity kind."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, cast

from pipesync.domain.model import NotFound

if TYPE_CHECKING:
    from pipesync.domain.desired import DesiredState
    from pipesync.domain.model import RemoteState
    from pipesync.domain.ports import Reconciler, StateStore

log = getLogger(__name__)


class SyncOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    REFRESHED = "refreshed"
    PURGED = "purged"
    DELETED = "deleted"
    ABSENT = "absent"


@dataclass(slots=True, frozen=True)
class SyncResult[TState]:
    """What happened to one address and the state now stored for it."""

    outcome: SyncOutcome
    state: TState | None = None


@dataclass(slots=True)
class EntitySync[TDesired: DesiredState, TState: RemoteState]:
    """Drive a reconciler from stored state and write the results back.

    The store is read to find the id to target and written after every
    successful create/update. A refresh that finds the entity gone removes the
    stored state instead of failing.
    """

    reconciler: Reconciler[TDesired, TState]
    store: StateStore

    def _stored(self, address: str) -> TState | None:
        return cast("TState | None", self.store.get(address))

    async def apply(
        self, address: str, desired: TDesired, *, deadline: float | None = None
    ) -> SyncResult[TState]:
        current = self._stored(address)
        if current is None:
            state = await self.reconciler.create(desired, deadline=deadline)
            self.store.put(address, state)
            return SyncResult(SyncOutcome.CREATED, state)

        state = await self.reconciler.update(current, desired, deadline=deadline)
        self.store.put(address, state)
        return SyncResult(SyncOutcome.UPDATED, state)

    async def refresh(self, address: str, *, deadline: float | None = None) -> SyncResult[TState]:
        current = self._stored(address)
        if current is None:
            return SyncResult(SyncOutcome.ABSENT)

        result = await self.reconciler.refresh(current, deadline=deadline)
        if isinstance(result, NotFound):
            log.warning(
                "%s %s no longer exists remotely; dropping %s from state",
                result.kind,
                result.entity_id,
                address,
            )
            self.store.remove(address)
            return SyncResult(SyncOutcome.PURGED)

        self.store.put(address, result)
        return SyncResult(SyncOutcome.REFRESHED, result)

    async def destroy(self, address: str, *, deadline: float | None = None) -> SyncResult[TState]:
        current = self._stored(address)
        if current is None:
            return SyncResult(SyncOutcome.ABSENT)

        await self.reconciler.destroy(current, deadline=deadline)
        self.store.remove(address)
        return SyncResult(SyncOutcome.DELETED)


__all__ = ["EntitySync", "SyncOutcome", "SyncResult"]
