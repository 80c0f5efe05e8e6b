"""Remote-state values for the reconciled entity kinds.

Instances are what the state store persists between runs. An instance only
exists once the service has assigned an id.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from pydantic import JsonValue


class EntityKind(StrEnum):
    PIPE = "pipe"
    PHASE = "phase"
    FIELD = "field"
    AUTOMATION = "automation"


class RepoKind(StrEnum):
    """Concrete repository types an automation may point at."""

    PIPE = "Pipe"
    TABLE = "Table"


@dataclass(frozen=True, slots=True)
class RepoRef:
    """Polymorphic repository reference; ``kind`` is unknown until the service reports it."""

    id: str
    kind: RepoKind | None = None


@dataclass(frozen=True, slots=True)
class Pipe:
    kind: ClassVar[EntityKind] = EntityKind.PIPE

    id: str
    name: str
    organization_id: str | None = None
    public: bool | None = None


@dataclass(frozen=True, slots=True)
class Phase:
    kind: ClassVar[EntityKind] = EntityKind.PHASE

    id: str
    pipe_id: str
    name: str


@dataclass(frozen=True, slots=True)
class Field:
    kind: ClassVar[EntityKind] = EntityKind.FIELD

    id: str
    internal_id: str
    phase_id: str
    type: str | None = None
    label: str | None = None
    required: bool | None = None


@dataclass(frozen=True, slots=True)
class Automation:
    kind: ClassVar[EntityKind] = EntityKind.AUTOMATION

    id: str
    name: str
    event_id: str
    action_id: str
    event_repo: RepoRef
    action_repo: RepoRef
    event_params: JsonValue | None = None
    action_params: JsonValue | None = None
    condition: JsonValue | None = None
    active: bool | None = None

    @property
    def event_repo_id(self) -> str:
        return self.event_repo.id

    @property
    def action_repo_id(self) -> str:
        return self.action_repo.id


type RemoteState = Pipe | Phase | Field | Automation


@dataclass(frozen=True, slots=True)
class NotFound:
    """Drift signal: the remote entity no longer exists and local state must be purged."""

    kind: EntityKind
    entity_id: str


__all__ = [
    "Automation",
    "EntityKind",
    "Field",
    "NotFound",
    "Phase",
    "Pipe",
    "RemoteState",
    "RepoKind",
    "RepoRef",
]
