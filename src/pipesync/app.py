"""Application wiring: one session per run."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pipesync.adapters.auth import build_auth
from pipesync.adapters.graphql import GraphQLClient
from pipesync.adapters.http_client import ApiHttpClient
from pipesync.adapters.memory_state import InMemoryStateStore
from pipesync.adapters.pipefy import (
    AutomationReconciler,
    FieldReconciler,
    PhaseReconciler,
    PipeReconciler,
)
from pipesync.config import get_api_config
from pipesync.domain.locks import EntityLockRegistry
from pipesync.domain.sync import EntitySync

if TYPE_CHECKING:
    from types import TracebackType

    import httpx

    from pipesync.config import ApiConfig
    from pipesync.domain.desired import AutomationSpec, FieldSpec, PhaseSpec, PipeSpec
    from pipesync.domain.model import Automation, Field, Phase, Pipe
    from pipesync.domain.ports import StateStore

log = getLogger(__name__)


class PipefySession:
    """Own the HTTP channel, the transport and the lock registry for one run.

    Every reconciler handed out by a session shares the same lock registry, so
    mutations of one entity are serialised across all of them.

    ``transport`` replaces the network layer of both the API channel and the
    token endpoint; tests pass an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        store: StateStore | None = None,
    ) -> None:
        self.config = config or get_api_config()
        self.locks = EntityLockRegistry()
        self.store: StateStore = store if store is not None else InMemoryStateStore()
        self.http = ApiHttpClient(
            self.config.http,
            auth=build_auth(self.config.credentials, transport=transport),
            transport=transport,
        )
        self.graphql = GraphQLClient(endpoint=self.config.endpoint, http=self.http)

        self.pipes = PipeReconciler(self.graphql, self.locks)
        self.phases = PhaseReconciler(self.graphql, self.locks)
        self.fields = FieldReconciler(self.graphql, self.locks)
        self.automations = AutomationReconciler(self.graphql, self.locks)

    async def __aenter__(self) -> PipefySession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if not self.http.is_closed:
            await self.http.aclose()
            log.debug("Closed Pipefy session for %s", self.config.endpoint)

    def pipe_sync(self) -> EntitySync[PipeSpec, Pipe]:
        return EntitySync(self.pipes, self.store)

    def phase_sync(self) -> EntitySync[PhaseSpec, Phase]:
        return EntitySync(self.phases, self.store)

    def field_sync(self) -> EntitySync[FieldSpec, Field]:
        return EntitySync(self.fields, self.store)

    def automation_sync(self) -> EntitySync[AutomationSpec, Automation]:
        return EntitySync(self.automations, self.store)


__all__ = ["PipefySession"]
