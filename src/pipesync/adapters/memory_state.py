"""Process-local state store."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pipesync.domain.model import RemoteState


class InMemoryStateStore:
    """Keeps remote state in a dict; useful for one-off runs and tests."""

    def __init__(self, initial: dict[str, RemoteState] | None = None) -> None:
        self._states: dict[str, RemoteState] = dict(initial or {})

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def get(self, address: str) -> RemoteState | None:
        return self._states.get(address)

    def put(self, address: str, state: RemoteState) -> None:
        self._states[address] = state

    def remove(self, address: str) -> None:
        self._states.pop(address, None)


__all__ = ["InMemoryStateStore"]
