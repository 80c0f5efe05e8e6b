"""Port for entity reconcilers as seen by the sync service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pipesync.domain.desired import DesiredState
    from pipesync.domain.model import NotFound


@runtime_checkable
class Reconciler[TDesired: DesiredState, TState](Protocol):
    """Create/refresh/update/destroy one entity kind against the remote service."""

    async def create(self, desired: TDesired, *, deadline: float | None = None) -> TState: ...

    async def refresh(
        self, current: TState, *, deadline: float | None = None
    ) -> TState | NotFound: ...

    async def update(
        self, current: TState, changes: TDesired, *, deadline: float | None = None
    ) -> TState: ...

    async def destroy(self, current: TState, *, deadline: float | None = None) -> None: ...


__all__ = ["Reconciler"]
