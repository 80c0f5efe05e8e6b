"""Extra calls that work around side effects and gaps of the Pipefy API.

Both sequences stop at the first failure. Steps already completed are not
undone.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pipesync.domain.errors import ChainResolutionError

from .base import error_context, require_success
from .operations import DELETE_PHASE, PHASE_REPO_ID, PIPE_PHASES, PIPE_UUID
from .schema import DeletePhaseData, PhaseRepoData, PipePhasesData, PipeUuidData

if TYPE_CHECKING:
    from pipesync.domain.ports import GraphQLTransport

log = getLogger(__name__)

PHASE_DISCOVERY = "phase discovery"
PHASE_LOOKUP = "phase lookup"
PIPE_LOOKUP = "pipe lookup"


async def remove_default_phases(
    transport: GraphQLTransport,
    pipe_id: str,
    *,
    deadline: float | None = None,
) -> list[str]:
    """Delete the phases Pipefy provisions for every new pipe.

    Returns the ids of the removed phases in the order they were deleted.
    """

    with error_context(f"create pipe: {PHASE_DISCOVERY}", pipe_id):
        data = await transport.execute(
            PIPE_PHASES,
            {"id": pipe_id},
            result=PipePhasesData,
            operation="pipePhases",
            deadline=deadline,
        )
        if data.pipe is None:
            raise ChainResolutionError(PHASE_DISCOVERY, f"pipe {pipe_id} not found")

    removed: list[str] = []
    for phase in data.pipe.phases or []:
        with error_context("create pipe: remove default phase", phase.id):
            result = await transport.execute(
                DELETE_PHASE,
                {"id": phase.id},
                result=DeletePhaseData,
                operation="deletePhase",
                deadline=deadline,
            )
            require_success(result.delete_phase, f"deletePhase for phase {phase.id}")
        removed.append(phase.id)
        log.debug("Removed default phase %s from pipe %s", phase.id, pipe_id)

    if removed:
        log.info("Removed %d default phase(s) from pipe %s", len(removed), pipe_id)
    return removed


async def resolve_pipe_uuid(
    transport: GraphQLTransport,
    *,
    field_id: str,
    phase_id: str,
    deadline: float | None = None,
) -> str:
    """Find the pipe UUID ``deletePhaseField`` needs for a field of ``phase_id``.

    The phase only exposes the legacy integer ``repo_id`` of its pipe, which is then
    looked up to obtain the UUID: two separate calls.
    """

    with error_context(f"delete field: {PHASE_LOOKUP}", field_id):
        phase_data = await transport.execute(
            PHASE_REPO_ID,
            {"id": phase_id},
            result=PhaseRepoData,
            operation="phaseRepoId",
            deadline=deadline,
        )
    if phase_data.phase is None:
        raise ChainResolutionError(PHASE_LOOKUP, f"could not resolve phase {phase_id}")
    repo_id = phase_data.phase.repo_id
    if not repo_id:
        raise ChainResolutionError(
            PHASE_LOOKUP, f"could not resolve a valid repo_id for phase {phase_id}"
        )

    with error_context(f"delete field: {PIPE_LOOKUP}", field_id):
        pipe_data = await transport.execute(
            PIPE_UUID,
            {"id": str(repo_id)},
            result=PipeUuidData,
            operation="pipeUuid",
            deadline=deadline,
        )
    if pipe_data.pipe is None or not pipe_data.pipe.uuid:
        raise ChainResolutionError(
            PIPE_LOOKUP, f"could not resolve pipe uuid for repo_id {repo_id}"
        )
    return pipe_data.pipe.uuid


__all__ = ["PHASE_LOOKUP", "PIPE_LOOKUP", "remove_default_phases", "resolve_pipe_uuid"]
