"""Phase field reconciler.

Pipefy has no query for a single field. Fields are read by listing the fields of
their phase, and a field's ``internal_id`` is taken from that listing.
"""

from __future__ import annotations

from logging import getLogger
from typing import ClassVar

from pipesync.domain.desired import FieldSpec, FieldUpdate
from pipesync.domain.errors import ApplicationError
from pipesync.domain.model import EntityKind, Field, NotFound

from .base import PipefyReconciler, error_context, require_success
from .compensation import resolve_pipe_uuid
from .operations import CREATE_FIELD, DELETE_FIELD, PHASE_FIELDS, UPDATE_FIELD
from .schema import CreateFieldData, DeleteFieldData, PhaseFieldsData, UpdateFieldData
from .translator import apply_changes, translate_field

log = getLogger(__name__)


class FieldReconciler(PipefyReconciler[FieldSpec, FieldUpdate, Field]):
    kind: ClassVar[EntityKind] = EntityKind.FIELD

    async def create(self, desired: FieldSpec, *, deadline: float | None = None) -> Field:
        with error_context("create field"):
            async with self._exclusive(desired.phase_id, deadline):
                data = await self._transport.execute(
                    CREATE_FIELD,
                    {"input": desired.explicit_attributes()},
                    result=CreateFieldData,
                    operation="createPhaseField",
                    deadline=deadline,
                )
            field = data.create_phase_field.phase_field if data.create_phase_field else None
            if field is None:
                raise ApplicationError("createPhaseField returned no field")

        state = translate_field(field, phase_id=desired.phase_id, known=desired)
        log.info(
            "Created field %s (internal id %s) in phase %s",
            state.id,
            state.internal_id,
            state.phase_id,
        )
        return state

    async def read(
        self, field_id: str, *, phase_id: str, deadline: float | None = None
    ) -> Field | NotFound:
        return await self._read(field_id, phase_id=phase_id, known=None, deadline=deadline)

    async def lookup(
        self, field_id: str, *, phase_id: str, deadline: float | None = None
    ) -> Field:
        return self._found(await self.read(field_id, phase_id=phase_id, deadline=deadline))

    async def update(
        self, current: Field, changes: FieldUpdate, *, deadline: float | None = None
    ) -> Field:
        """Send label/required changes; the returned ``internal_id`` replaces the stored one."""

        attributes = self._update_attributes(current, changes)
        if not attributes:
            log.debug("No changes for field %s", current.id)
            return current

        with error_context("update field", current.id):
            async with self._exclusive(current.id, deadline):
                data = await self._transport.execute(
                    UPDATE_FIELD,
                    {"input": {"id": current.id, **attributes}},
                    result=UpdateFieldData,
                    operation="updatePhaseField",
                    deadline=deadline,
                )
            field = data.update_phase_field.phase_field if data.update_phase_field else None
            if field is None:
                raise ApplicationError("updatePhaseField returned no field")
        return translate_field(
            field, phase_id=current.phase_id, known=apply_changes(current, attributes)
        )

    async def delete(
        self, field_id: str, *, phase_id: str, deadline: float | None = None
    ) -> None:
        """Delete a field of ``phase_id``.

        ``deletePhaseField`` wants the UUID of the owning pipe, which takes two
        lookups to find. Nothing is deleted when either lookup fails.
        """

        with error_context("delete field", field_id):
            async with self._exclusive(field_id, deadline):
                pipe_uuid = await resolve_pipe_uuid(
                    self._transport, field_id=field_id, phase_id=phase_id, deadline=deadline
                )
                data = await self._transport.execute(
                    DELETE_FIELD,
                    {"id": field_id, "pipeUuid": pipe_uuid},
                    result=DeleteFieldData,
                    operation="deletePhaseField",
                    deadline=deadline,
                )
                require_success(data.delete_phase_field, "deletePhaseField")
        log.info("Deleted field %s from phase %s", field_id, phase_id)

    async def _read(
        self,
        field_id: str,
        *,
        phase_id: str,
        known: Field | None,
        deadline: float | None,
    ) -> Field | NotFound:
        with error_context("read field", field_id):
            data = await self._transport.execute(
                PHASE_FIELDS,
                {"phaseId": phase_id},
                result=PhaseFieldsData,
                operation="phaseFields",
                deadline=deadline,
            )
        if data.phase is None:
            log.debug("Phase %s of field %s not found", phase_id, field_id)
            return NotFound(self.kind, field_id)

        for field in data.phase.fields:
            if field.id == field_id:
                return translate_field(field, phase_id=phase_id, known=known)
        return NotFound(self.kind, field_id)

    async def _read_current(self, current: Field, *, deadline: float | None) -> Field | NotFound:
        return await self._read(
            current.id, phase_id=current.phase_id, known=current, deadline=deadline
        )

    async def _delete_current(self, current: Field, *, deadline: float | None) -> None:
        await self.delete(current.id, phase_id=current.phase_id, deadline=deadline)


__all__ = ["FieldReconciler"]
