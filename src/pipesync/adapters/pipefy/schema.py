"""Minimal Pydantic models for Pipefy GraphQL responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class PipefyBaseModel(BaseModel):
    # ids arrive as strings or integers depending on the type
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


class IdRef(PipefyBaseModel):
    id: str


class TypedRef(PipefyBaseModel):
    id: str | None = None
    typename: str | None = Field(default=None, alias="__typename")


class DeletePayload(PipefyBaseModel):
    success: bool | None = None


# pipes


class PipePayload(PipefyBaseModel):
    id: str
    name: str | None = None
    public: bool | None = None
    organization: IdRef | None = None


class PipeMutationPayload(PipefyBaseModel):
    pipe: PipePayload | None = None


class CreatePipeData(PipefyBaseModel):
    create_pipe: PipeMutationPayload | None = Field(default=None, alias="createPipe")


class UpdatePipeData(PipefyBaseModel):
    update_pipe: PipeMutationPayload | None = Field(default=None, alias="updatePipe")


class PipeQueryData(PipefyBaseModel):
    pipe: PipePayload | None = None


class DeletePipeData(PipefyBaseModel):
    delete_pipe: DeletePayload | None = Field(default=None, alias="deletePipe")


class PipePhases(PipefyBaseModel):
    id: str | None = None
    phases: list[IdRef] | None = None


class PipePhasesData(PipefyBaseModel):
    pipe: PipePhases | None = None


class PipeUuid(PipefyBaseModel):
    uuid: str | None = None


class PipeUuidData(PipefyBaseModel):
    pipe: PipeUuid | None = None


# phases


class PhasePayload(PipefyBaseModel):
    id: str
    name: str | None = None
    pipe: IdRef | None = None


class PhaseMutationPayload(PipefyBaseModel):
    phase: PhasePayload | None = None


class CreatePhaseData(PipefyBaseModel):
    create_phase: PhaseMutationPayload | None = Field(default=None, alias="createPhase")


class UpdatePhaseData(PipefyBaseModel):
    update_phase: PhaseMutationPayload | None = Field(default=None, alias="updatePhase")


class PhaseQueryData(PipefyBaseModel):
    phase: PhasePayload | None = None


class DeletePhaseData(PipefyBaseModel):
    delete_phase: DeletePayload | None = Field(default=None, alias="deletePhase")


class PhaseRepo(PipefyBaseModel):
    repo_id: int | None = None


class PhaseRepoData(PipefyBaseModel):
    phase: PhaseRepo | None = None


# fields


class FieldPayload(PipefyBaseModel):
    id: str
    internal_id: str | None = None
    label: str | None = None
    type: str | None = None
    required: bool | None = None


class FieldMutationPayload(PipefyBaseModel):
    phase_field: FieldPayload | None = None


class CreateFieldData(PipefyBaseModel):
    create_phase_field: FieldMutationPayload | None = Field(
        default=None, alias="createPhaseField"
    )


class UpdateFieldData(PipefyBaseModel):
    update_phase_field: FieldMutationPayload | None = Field(
        default=None, alias="updatePhaseField"
    )


class PhaseFields(PipefyBaseModel):
    fields: list[FieldPayload] = Field(default_factory=list["FieldPayload"])


class PhaseFieldsData(PipefyBaseModel):
    phase: PhaseFields | None = None


class DeleteFieldData(PipefyBaseModel):
    delete_phase_field: DeletePayload | None = Field(default=None, alias="deletePhaseField")


# automations


class AutomationPayload(PipefyBaseModel):
    id: str
    name: str | None = None
    action_id: str | None = None
    event_id: str | None = None
    active: bool | None = None
    event_repo: TypedRef | None = None
    action_repo: TypedRef | None = Field(default=None, alias="action_repo_v2")


class AutomationMutationPayload(PipefyBaseModel):
    automation: AutomationPayload | None = None
    error_details: JsonValue | None = None


class CreateAutomationData(PipefyBaseModel):
    create_automation: AutomationMutationPayload | None = Field(
        default=None, alias="createAutomation"
    )


class UpdateAutomationData(PipefyBaseModel):
    update_automation: AutomationMutationPayload | None = Field(
        default=None, alias="updateAutomation"
    )


class AutomationQueryData(PipefyBaseModel):
    automation: AutomationPayload | None = None


class DeleteAutomationData(PipefyBaseModel):
    delete_automation: DeletePayload | None = Field(default=None, alias="deleteAutomation")
