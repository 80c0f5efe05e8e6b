"""Port for persisting remote state between reconciliation runs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pipesync.domain.model import RemoteState


@runtime_checkable
class StateStore(Protocol):
    """Keyed storage for remote-state values; keys are declaration addresses."""

    def get(self, address: str) -> RemoteState | None: ...

    def put(self, address: str, state: RemoteState) -> None: ...

    def remove(self, address: str) -> None: ...


__all__ = ["StateStore"]
