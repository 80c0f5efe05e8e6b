"""Automation reconciler."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, ClassVar

from pipesync.domain.desired import AutomationSpec, AutomationUpdate
from pipesync.domain.errors import ApplicationError
from pipesync.domain.model import Automation, EntityKind, NotFound

from .base import PipefyReconciler, error_context, require_success
from .operations import (
    CREATE_AUTOMATION,
    DELETE_AUTOMATION,
    READ_AUTOMATION,
    UPDATE_AUTOMATION,
)
from .schema import (
    AutomationQueryData,
    CreateAutomationData,
    DeleteAutomationData,
    UpdateAutomationData,
)
from .translator import apply_changes, translate_automation

if TYPE_CHECKING:
    from .schema import AutomationMutationPayload, AutomationPayload

log = getLogger(__name__)


def _require_automation(
    result: AutomationMutationPayload | None, mutation: str
) -> AutomationPayload:
    # rejected input comes back as error_details instead of an automation
    if result is None or result.automation is None:
        details = result.error_details if result is not None else None
        raise ApplicationError(
            f"{mutation} returned no automation; see error details", details=details
        )
    return result.automation


class AutomationReconciler(PipefyReconciler[AutomationSpec, AutomationUpdate, Automation]):
    """Reconcile automations.

    ``event_params``, ``action_params`` and ``condition`` are never returned by the
    service; the values last sent are kept in state.
    """

    kind: ClassVar[EntityKind] = EntityKind.AUTOMATION

    async def create(
        self, desired: AutomationSpec, *, deadline: float | None = None
    ) -> Automation:
        with error_context("create automation"):
            async with self._exclusive(desired.event_repo_id, deadline):
                data = await self._transport.execute(
                    CREATE_AUTOMATION,
                    {"input": desired.explicit_attributes()},
                    result=CreateAutomationData,
                    operation="createAutomation",
                    deadline=deadline,
                )
            payload = _require_automation(data.create_automation, "createAutomation")

        state = translate_automation(payload, known=desired)
        log.info("Created automation %s (%s)", state.id, state.name)
        return state

    async def read(
        self, automation_id: str, *, deadline: float | None = None
    ) -> Automation | NotFound:
        return await self._read(automation_id, known=None, deadline=deadline)

    async def lookup(self, automation_id: str, *, deadline: float | None = None) -> Automation:
        return self._found(await self.read(automation_id, deadline=deadline))

    async def update(
        self,
        current: Automation,
        changes: AutomationUpdate,
        *,
        deadline: float | None = None,
    ) -> Automation:
        attributes = self._update_attributes(current, changes)
        if not attributes:
            log.debug("No changes for automation %s", current.id)
            return current

        with error_context("update automation", current.id):
            async with self._exclusive(current.id, deadline):
                data = await self._transport.execute(
                    UPDATE_AUTOMATION,
                    {"input": {"id": current.id, **attributes}},
                    result=UpdateAutomationData,
                    operation="updateAutomation",
                    deadline=deadline,
                )
            payload = _require_automation(data.update_automation, "updateAutomation")
        return translate_automation(payload, known=apply_changes(current, attributes))

    async def delete(self, automation_id: str, *, deadline: float | None = None) -> None:
        with error_context("delete automation", automation_id):
            async with self._exclusive(automation_id, deadline):
                data = await self._transport.execute(
                    DELETE_AUTOMATION,
                    {"id": automation_id},
                    result=DeleteAutomationData,
                    operation="deleteAutomation",
                    deadline=deadline,
                )
                require_success(data.delete_automation, "deleteAutomation")
        log.info("Deleted automation %s", automation_id)

    async def _read(
        self, automation_id: str, *, known: Automation | None, deadline: float | None
    ) -> Automation | NotFound:
        with error_context("read automation", automation_id):
            data = await self._transport.execute(
                READ_AUTOMATION,
                {"id": automation_id},
                result=AutomationQueryData,
                operation="automation",
                deadline=deadline,
            )
        if data.automation is None:
            return NotFound(self.kind, automation_id)
        return translate_automation(data.automation, known=known)

    async def _read_current(
        self, current: Automation, *, deadline: float | None
    ) -> Automation | NotFound:
        return await self._read(current.id, known=current, deadline=deadline)

    async def _delete_current(self, current: Automation, *, deadline: float | None) -> None:
        await self.delete(current.id, deadline=deadline)


__all__ = ["AutomationReconciler"]
