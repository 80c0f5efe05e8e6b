from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

import pytest

from pipesync.adapters.memory_state import InMemoryStateStore
from pipesync.domain.desired import PhaseSpec
from pipesync.domain.errors import ApplicationError
from pipesync.domain.model import EntityKind, NotFound, Phase
from pipesync.domain.ports import Reconciler, StateStore
from pipesync.domain.sync import EntitySync, SyncOutcome

if TYPE_CHECKING:
    from pipesync.domain.desired import PhaseUpdate


class FakePhaseReconciler:
    def __init__(self) -> None:
        self.remote: dict[str, Phase] = {}
        self.calls: list[str] = []
        self.fail_delete = False

    async def create(self, desired: PhaseSpec, *, deadline: float | None = None) -> Phase:
        self.calls.append("create")
        phase_id = f"phase_{len(self.remote) + 1}"
        phase = Phase(id=phase_id, pipe_id=desired.pipe_id, name=desired.name)
        self.remote[phase.id] = phase
        return phase

    async def refresh(self, current: Phase, *, deadline: float | None = None) -> Phase | NotFound:
        self.calls.append("refresh")
        found = self.remote.get(current.id)
        return found if found is not None else NotFound(EntityKind.PHASE, current.id)

    async def update(
        self, current: Phase, changes: PhaseUpdate, *, deadline: float | None = None
    ) -> Phase:
        self.calls.append("update")
        updated = replace(current, **changes.mutable_attributes())
        self.remote[current.id] = updated
        return updated

    async def destroy(self, current: Phase, *, deadline: float | None = None) -> None:
        self.calls.append("destroy")
        if self.fail_delete:
            raise ApplicationError("deletePhase returned success=false")
        self.remote.pop(current.id, None)


@pytest.fixture
def reconciler() -> FakePhaseReconciler:
    return FakePhaseReconciler()


@pytest.fixture
def store() -> InMemoryStateStore:
    return InMemoryStateStore()


def test_fakes_satisfy_ports(reconciler: FakePhaseReconciler, store: InMemoryStateStore) -> None:
    assert isinstance(reconciler, Reconciler)
    assert isinstance(store, StateStore)


def test_apply_creates_then_updates(
    reconciler: FakePhaseReconciler, store: InMemoryStateStore
) -> None:
    sync = EntitySync(reconciler, store)

    async def scenario() -> None:
        created = await sync.apply("phase.todo", PhaseSpec(pipe_id="pipe_1", name="To do"))
        updated = await sync.apply("phase.todo", PhaseSpec(pipe_id="pipe_1", name="Doing"))

        assert created.outcome is SyncOutcome.CREATED
        assert updated.outcome is SyncOutcome.UPDATED
        assert updated.state == Phase(id="phase_1", pipe_id="pipe_1", name="Doing")

    asyncio.run(scenario())

    assert reconciler.calls == ["create", "update"]
    assert store.get("phase.todo") == Phase(id="phase_1", pipe_id="pipe_1", name="Doing")


def test_refresh_purges_state_when_remote_is_gone(
    reconciler: FakePhaseReconciler,
    store: InMemoryStateStore,
    caplog: pytest.LogCaptureFixture,
) -> None:
    store.put("phase.todo", Phase(id="phase_9", pipe_id="pipe_1", name="To do"))
    sync = EntitySync(reconciler, store)

    with caplog.at_level("WARNING"):
        result = asyncio.run(sync.refresh("phase.todo"))

    assert result.outcome is SyncOutcome.PURGED
    assert result.state is None
    assert store.get("phase.todo") is None
    assert "phase_9" in caplog.text


def test_refresh_stores_the_remote_state(
    reconciler: FakePhaseReconciler, store: InMemoryStateStore
) -> None:
    remote = Phase(id="phase_1", pipe_id="pipe_1", name="Renamed elsewhere")
    reconciler.remote[remote.id] = remote
    store.put("phase.todo", replace(remote, name="To do"))

    result = asyncio.run(EntitySync(reconciler, store).refresh("phase.todo"))

    assert result.outcome is SyncOutcome.REFRESHED
    assert store.get("phase.todo") == remote


def test_missing_address_is_absent(
    reconciler: FakePhaseReconciler, store: InMemoryStateStore
) -> None:
    sync = EntitySync(reconciler, store)

    assert asyncio.run(sync.refresh("phase.none")).outcome is SyncOutcome.ABSENT
    assert asyncio.run(sync.destroy("phase.none")).outcome is SyncOutcome.ABSENT
    assert reconciler.calls == []


def test_destroy_removes_state(reconciler: FakePhaseReconciler, store: InMemoryStateStore) -> None:
    phase = Phase(id="phase_1", pipe_id="pipe_1", name="To do")
    reconciler.remote[phase.id] = phase
    store.put("phase.todo", phase)

    result = asyncio.run(EntitySync(reconciler, store).destroy("phase.todo"))

    assert result.outcome is SyncOutcome.DELETED
    assert store.get("phase.todo") is None
    assert reconciler.remote == {}


def test_failed_destroy_keeps_state(
    reconciler: FakePhaseReconciler, store: InMemoryStateStore
) -> None:
    phase = Phase(id="phase_1", pipe_id="pipe_1", name="To do")
    store.put("phase.todo", phase)
    reconciler.fail_delete = True

    with pytest.raises(ApplicationError):
        asyncio.run(EntitySync(reconciler, store).destroy("phase.todo"))

    assert store.get("phase.todo") == phase
