"""Shared plumbing for the Pipefy entity reconcilers."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager, contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any, ClassVar

from pipesync.domain.errors import (
    ApplicationError,
    EntityNotFoundError,
    OperationCancelledError,
    PipesyncError,
)
from pipesync.domain.model import NotFound

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from pipesync.domain.desired import DesiredState
    from pipesync.domain.locks import EntityLockRegistry
    from pipesync.domain.model import EntityKind, RemoteState
    from pipesync.domain.ports import GraphQLTransport

    from .schema import DeletePayload

log = getLogger(__name__)


@contextmanager
def error_context(operation: str, entity_id: str | None = None) -> Iterator[None]:
    """Attach operation and entity id to remote errors leaving the block."""

    try:
        yield
    except PipesyncError as exc:
        exc.with_context(operation, entity_id)
        raise


def require_success(payload: DeletePayload | None, mutation: str) -> None:
    if payload is None or not payload.success:
        raise ApplicationError(f"{mutation} returned success=false")


class PipefyReconciler[TDesired: DesiredState, TChanges: DesiredState, TState: RemoteState](ABC):
    """Base class for one entity kind.

    Mutations run while holding the per-entity lock from the shared registry; reads
    never take it. ``refresh`` and ``destroy`` work from stored state so the sync
    service can drive every kind the same way.
    """

    kind: ClassVar[EntityKind]

    def __init__(self, transport: GraphQLTransport, locks: EntityLockRegistry) -> None:
        self._transport = transport
        self._locks = locks

    @abstractmethod
    async def create(self, desired: TDesired, *, deadline: float | None = None) -> TState: ...

    @abstractmethod
    async def update(
        self, current: TState, changes: TChanges, *, deadline: float | None = None
    ) -> TState: ...

    @abstractmethod
    async def _read_current(
        self, current: TState, *, deadline: float | None
    ) -> TState | NotFound: ...

    @abstractmethod
    async def _delete_current(self, current: TState, *, deadline: float | None) -> None: ...

    async def refresh(
        self, current: TState, *, deadline: float | None = None
    ) -> TState | NotFound:
        """Re-read ``current``; attributes the service does not echo are kept."""

        result = await self._read_current(current, deadline=deadline)
        if isinstance(result, NotFound):
            log.info("%s %s not found remotely", self.kind, current.id)
        return result

    async def destroy(self, current: TState, *, deadline: float | None = None) -> None:
        await self._delete_current(current, deadline=deadline)

    @asynccontextmanager
    async def _exclusive(self, entity_id: str, deadline: float | None) -> AsyncIterator[None]:
        """Hold the entity's lock; waiting for it counts against ``deadline``."""

        try:
            async with asyncio.timeout_at(deadline):
                release = await self._locks.acquire(entity_id)
        except TimeoutError:
            raise OperationCancelledError(
                f"deadline exceeded waiting for lock on {entity_id}"
            ) from None
        try:
            yield
        finally:
            release()

    def _found(self, result: TState | NotFound) -> TState:
        if isinstance(result, NotFound):
            raise EntityNotFoundError(self.kind, result.entity_id)
        return result

    def _update_attributes(self, current: TState, changes: DesiredState) -> dict[str, Any]:
        """Explicitly set, mutable attributes of ``changes``."""

        explicit = changes.explicit_attributes()
        for name in changes.immutable & explicit.keys():
            stored = getattr(current, name, None)
            if stored is not None and stored != explicit[name]:
                log.warning(
                    "Ignoring change of immutable %s on %s %s (%r -> %r)",
                    name,
                    self.kind,
                    current.id,
                    stored,
                    explicit[name],
                )
        return changes.mutable_attributes()


__all__ = ["PipefyReconciler", "error_context", "require_success"]
