from __future__ import annotations

import asyncio

import pytest

from pipesync.adapters.pipefy import operations as ops
from pipesync.app import PipefySession
from pipesync.config import MissingConfigurationError
from pipesync.domain.desired import PhaseSpec
from pipesync.domain.model import Phase
from pipesync.domain.sync import SyncOutcome
from tests.support.pipefy import API_CONFIG, FakePipefyBackend


def test_reconcilers_share_one_lock_registry() -> None:
    async def scenario() -> None:
        async with PipefySession(API_CONFIG) as session:
            assert session.pipes._locks is session.locks
            assert session.automations._locks is session.locks
        assert session.http.is_closed

    asyncio.run(scenario())


def test_session_reads_configuration_from_the_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PIPEFY_TOKEN", "env-token")
    monkeypatch.setenv("PIPEFY_ENDPOINT", "https://pipefy.example/graphql")

    async def scenario() -> str:
        async with PipefySession() as session:
            return session.config.endpoint

    assert asyncio.run(scenario()) == "https://pipefy.example/graphql"


def test_session_without_credentials_fails() -> None:
    with pytest.raises(MissingConfigurationError):
        PipefySession()


def test_phase_sync_drives_the_reconciler(backend: FakePipefyBackend) -> None:
    backend.on(ops.CREATE_PHASE, {"createPhase": {"phase": {"id": "phase_1", "name": "To do"}}})
    backend.on(ops.READ_PHASE, {"phase": None})

    async def scenario(session: PipefySession) -> list[SyncOutcome]:
        sync = session.phase_sync()
        created = await sync.apply("phase.todo", PhaseSpec(pipe_id="pipe_1", name="To do"))
        assert session.store.get("phase.todo") == Phase(
            id="phase_1", pipe_id="pipe_1", name="To do"
        )
        refreshed = await sync.refresh("phase.todo")
        return [created.outcome, refreshed.outcome]

    async def run() -> list[SyncOutcome]:
        async with PipefySession(API_CONFIG, transport=backend.transport) as session:
            outcomes = await scenario(session)
            assert session.store.get("phase.todo") is None
            return outcomes

    assert asyncio.run(run()) == [SyncOutcome.CREATED, SyncOutcome.PURGED]
