"""Desired-state values as handed over by the configuration source.

The models distinguish attributes that were explicitly set from attributes that
were left out: only the former are ever transmitted. Structured JSON attributes
are validated here, once, when the desired state is accepted.
"""

from __future__ import annotations

import json
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator


def _parse_json_text(value: object) -> object:
    """Accept JSON text for structured attributes; blank text is not JSON."""

    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON: {exc}") from exc
    return value


class DesiredState(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    immutable: ClassVar[frozenset[str]] = frozenset()

    def explicit_attributes(self) -> dict[str, Any]:
        """Attributes explicitly set to a non-null value, in declaration order."""

        return {
            name: value
            for name in type(self).model_fields
            if name in self.model_fields_set and (value := getattr(self, name)) is not None
        }

    def mutable_attributes(self) -> dict[str, Any]:
        """Explicit attributes that may be sent on update."""

        return {
            name: value
            for name, value in self.explicit_attributes().items()
            if name not in self.immutable
        }


class PipeSpec(DesiredState):
    immutable: ClassVar[frozenset[str]] = frozenset({"organization_id"})

    name: str
    organization_id: str = Field(min_length=1)
    public: bool | None = None


class PipeChanges(DesiredState):
    name: str | None = None
    public: bool | None = None


class PhaseSpec(DesiredState):
    immutable: ClassVar[frozenset[str]] = frozenset({"pipe_id"})

    pipe_id: str = Field(min_length=1)
    name: str


class PhaseChanges(DesiredState):
    name: str | None = None


class FieldSpec(DesiredState):
    # the update mutation has no way to change the type
    immutable: ClassVar[frozenset[str]] = frozenset({"phase_id", "type"})

    phase_id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    label: str
    required: bool | None = None


class FieldChanges(DesiredState):
    label: str | None = None
    required: bool | None = None


class _AutomationAttributes(DesiredState):
    event_params: JsonValue | None = None
    action_params: JsonValue | None = None
    condition: JsonValue | None = None
    active: bool | None = None

    validate_structured = field_validator(
        "event_params", "action_params", "condition", mode="before"
    )(_parse_json_text)


class AutomationSpec(_AutomationAttributes):
    immutable: ClassVar[frozenset[str]] = frozenset({"event_repo_id"})

    name: str
    event_id: str
    action_id: str
    event_repo_id: str = Field(min_length=1)
    action_repo_id: str


class AutomationChanges(_AutomationAttributes):
    name: str | None = None
    event_id: str | None = None
    action_id: str | None = None
    action_repo_id: str | None = None


type PipeUpdate = PipeSpec | PipeChanges
type PhaseUpdate = PhaseSpec | PhaseChanges
type FieldUpdate = FieldSpec | FieldChanges
type AutomationUpdate = AutomationSpec | AutomationChanges


__all__ = [
    "AutomationChanges",
    "AutomationSpec",
    "AutomationUpdate",
    "DesiredState",
    "FieldChanges",
    "FieldSpec",
    "FieldUpdate",
    "PhaseChanges",
    "PhaseSpec",
    "PhaseUpdate",
    "PipeChanges",
    "PipeSpec",
    "PipeUpdate",
]
