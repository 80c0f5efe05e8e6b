"""Pipe reconciler."""

from __future__ import annotations

from logging import getLogger
from typing import ClassVar

from pipesync.domain.desired import PipeSpec, PipeUpdate
from pipesync.domain.errors import ApplicationError
from pipesync.domain.model import EntityKind, NotFound, Pipe

from .base import PipefyReconciler, error_context, require_success
from .compensation import remove_default_phases
from .operations import CREATE_PIPE, DELETE_PIPE, READ_PIPE, UPDATE_PIPE
from .schema import CreatePipeData, DeletePipeData, PipeQueryData, UpdatePipeData
from .translator import apply_changes, translate_pipe

log = getLogger(__name__)


class PipeReconciler(PipefyReconciler[PipeSpec, PipeUpdate, Pipe]):
    """Reconcile pipes.

    Pipefy gives every new pipe a set of default phases. ``create`` deletes them
    before returning, so the pipe only ever holds the phases declared for it.
    """

    kind: ClassVar[EntityKind] = EntityKind.PIPE

    async def create(self, desired: PipeSpec, *, deadline: float | None = None) -> Pipe:
        with error_context("create pipe"):
            data = await self._transport.execute(
                CREATE_PIPE,
                {"input": desired.explicit_attributes()},
                result=CreatePipeData,
                operation="createPipe",
                deadline=deadline,
            )
            payload = data.create_pipe.pipe if data.create_pipe else None
            if payload is None:
                raise ApplicationError("createPipe returned no pipe")

        state = translate_pipe(payload, known=desired)
        log.info("Created pipe %s (%s)", state.id, state.name)

        with error_context("create pipe", state.id):
            async with self._exclusive(state.id, deadline):
                await remove_default_phases(self._transport, state.id, deadline=deadline)
        return state

    async def read(self, pipe_id: str, *, deadline: float | None = None) -> Pipe | NotFound:
        return await self._read(pipe_id, known=None, deadline=deadline)

    async def lookup(self, pipe_id: str, *, deadline: float | None = None) -> Pipe:
        """Read a pipe that must exist."""

        return self._found(await self.read(pipe_id, deadline=deadline))

    async def update(
        self, current: Pipe, changes: PipeUpdate, *, deadline: float | None = None
    ) -> Pipe:
        attributes = self._update_attributes(current, changes)
        if not attributes:
            log.debug("No changes for pipe %s", current.id)
            return current

        with error_context("update pipe", current.id):
            async with self._exclusive(current.id, deadline):
                data = await self._transport.execute(
                    UPDATE_PIPE,
                    {"input": {"id": current.id, **attributes}},
                    result=UpdatePipeData,
                    operation="updatePipe",
                    deadline=deadline,
                )
            payload = data.update_pipe.pipe if data.update_pipe else None
            if payload is None:
                raise ApplicationError("updatePipe returned no pipe")
        return translate_pipe(payload, known=apply_changes(current, attributes))

    async def delete(self, pipe_id: str, *, deadline: float | None = None) -> None:
        with error_context("delete pipe", pipe_id):
            async with self._exclusive(pipe_id, deadline):
                data = await self._transport.execute(
                    DELETE_PIPE,
                    {"id": pipe_id},
                    result=DeletePipeData,
                    operation="deletePipe",
                    deadline=deadline,
                )
                require_success(data.delete_pipe, "deletePipe")
        log.info("Deleted pipe %s", pipe_id)

    async def _read(
        self, pipe_id: str, *, known: Pipe | None, deadline: float | None
    ) -> Pipe | NotFound:
        with error_context("read pipe", pipe_id):
            data = await self._transport.execute(
                READ_PIPE,
                {"id": pipe_id},
                result=PipeQueryData,
                operation="pipe",
                deadline=deadline,
            )
        if data.pipe is None:
            return NotFound(self.kind, pipe_id)
        return translate_pipe(data.pipe, known=known)

    async def _read_current(self, current: Pipe, *, deadline: float | None) -> Pipe | NotFound:
        return await self._read(current.id, known=current, deadline=deadline)

    async def _delete_current(self, current: Pipe, *, deadline: float | None) -> None:
        await self.delete(current.id, deadline=deadline)


__all__ = ["PipeReconciler"]
