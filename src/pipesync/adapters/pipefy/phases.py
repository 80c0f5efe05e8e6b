"""Phase reconciler."""

from __future__ import annotations

from logging import getLogger
from typing import ClassVar

from pipesync.domain.desired import PhaseSpec, PhaseUpdate
from pipesync.domain.errors import ApplicationError
from pipesync.domain.model import EntityKind, NotFound, Phase

from .base import PipefyReconciler, error_context, require_success
from .operations import CREATE_PHASE, DELETE_PHASE, READ_PHASE, UPDATE_PHASE
from .schema import CreatePhaseData, DeletePhaseData, PhaseQueryData, UpdatePhaseData
from .translator import apply_changes, translate_phase

log = getLogger(__name__)


class PhaseReconciler(PipefyReconciler[PhaseSpec, PhaseUpdate, Phase]):
    kind: ClassVar[EntityKind] = EntityKind.PHASE

    async def create(self, desired: PhaseSpec, *, deadline: float | None = None) -> Phase:
        # phases of one pipe are created one at a time
        with error_context("create phase"):
            async with self._exclusive(desired.pipe_id, deadline):
                data = await self._transport.execute(
                    CREATE_PHASE,
                    {"input": desired.explicit_attributes()},
                    result=CreatePhaseData,
                    operation="createPhase",
                    deadline=deadline,
                )
            payload = data.create_phase.phase if data.create_phase else None
            if payload is None:
                raise ApplicationError("createPhase returned no phase")

        state = translate_phase(payload, known=desired)
        log.info("Created phase %s (%s) in pipe %s", state.id, state.name, state.pipe_id)
        return state

    async def read(self, phase_id: str, *, deadline: float | None = None) -> Phase | NotFound:
        return await self._read(phase_id, known=None, deadline=deadline)

    async def lookup(self, phase_id: str, *, deadline: float | None = None) -> Phase:
        return self._found(await self.read(phase_id, deadline=deadline))

    async def update(
        self, current: Phase, changes: PhaseUpdate, *, deadline: float | None = None
    ) -> Phase:
        attributes = self._update_attributes(current, changes)
        if not attributes:
            log.debug("No changes for phase %s", current.id)
            return current

        with error_context("update phase", current.id):
            async with self._exclusive(current.id, deadline):
                data = await self._transport.execute(
                    UPDATE_PHASE,
                    {"input": {"id": current.id, **attributes}},
                    result=UpdatePhaseData,
                    operation="updatePhase",
                    deadline=deadline,
                )
            payload = data.update_phase.phase if data.update_phase else None
            if payload is None:
                raise ApplicationError("updatePhase returned no phase")
        return translate_phase(payload, known=apply_changes(current, attributes))

    async def delete(self, phase_id: str, *, deadline: float | None = None) -> None:
        with error_context("delete phase", phase_id):
            async with self._exclusive(phase_id, deadline):
                data = await self._transport.execute(
                    DELETE_PHASE,
                    {"id": phase_id},
                    result=DeletePhaseData,
                    operation="deletePhase",
                    deadline=deadline,
                )
                require_success(data.delete_phase, "deletePhase")
        log.info("Deleted phase %s", phase_id)

    async def _read(
        self, phase_id: str, *, known: Phase | None, deadline: float | None
    ) -> Phase | NotFound:
        with error_context("read phase", phase_id):
            data = await self._transport.execute(
                READ_PHASE,
                {"id": phase_id},
                result=PhaseQueryData,
                operation="phase",
                deadline=deadline,
            )
        if data.phase is None:
            return NotFound(self.kind, phase_id)
        return translate_phase(data.phase, known=known)

    async def _read_current(self, current: Phase, *, deadline: float | None) -> Phase | NotFound:
        return await self._read(current.id, known=current, deadline=deadline)

    async def _delete_current(self, current: Phase, *, deadline: float | None) -> None:
        await self.delete(current.id, deadline=deadline)


__all__ = ["PhaseReconciler"]
