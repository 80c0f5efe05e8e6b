"""Translate Pipefy payloads into remote-state values.

The service does not echo every attribute back. Each translation therefore takes
what is already ``known`` about the entity (the desired state on create, the stored
state on refresh) and uses it for whatever the payload leaves out.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any

from pipesync.domain.model import Automation, Field, Phase, Pipe, RepoKind, RepoRef

if TYPE_CHECKING:
    from pipesync.domain.desired import AutomationSpec, FieldSpec, PhaseSpec, PipeSpec
    from pipesync.domain.model import RemoteState

    from .schema import AutomationPayload, FieldPayload, PhasePayload, PipePayload, TypedRef


def _echoed[T](value: T | None, known: object | None, name: str, default: T) -> T:
    if value is not None:
        return value
    if known is not None and (stored := getattr(known, name, None)) is not None:
        return stored
    return default


def translate_pipe(payload: PipePayload, *, known: PipeSpec | Pipe | None = None) -> Pipe:
    organization_id = payload.organization.id if payload.organization else None
    return Pipe(
        id=payload.id,
        name=_echoed(payload.name, known, "name", ""),
        organization_id=_echoed(organization_id, known, "organization_id", None),
        public=_echoed(payload.public, known, "public", None),
    )


def translate_phase(payload: PhasePayload, *, known: PhaseSpec | Phase | None = None) -> Phase:
    pipe_id = payload.pipe.id if payload.pipe else None
    return Phase(
        id=payload.id,
        pipe_id=_echoed(pipe_id, known, "pipe_id", ""),
        name=_echoed(payload.name, known, "name", ""),
    )


def translate_field(
    payload: FieldPayload,
    *,
    phase_id: str,
    known: FieldSpec | Field | None = None,
) -> Field:
    return Field(
        id=payload.id,
        internal_id=_echoed(payload.internal_id, known, "internal_id", ""),
        phase_id=phase_id,
        type=_echoed(payload.type, known, "type", None),
        label=_echoed(payload.label, known, "label", None),
        required=_echoed(payload.required, known, "required", None),
    )


def _repo_kind(typename: str | None) -> RepoKind | None:
    try:
        return RepoKind(typename) if typename else None
    except ValueError:
        return None


def _repo_ref(echoed: TypedRef | None, known: RepoRef | None) -> RepoRef:
    if echoed is None or not echoed.id:
        return known if known is not None else RepoRef(id="")
    kind = _repo_kind(echoed.typename)
    if kind is None and known is not None and known.id == echoed.id:
        kind = known.kind
    return RepoRef(id=echoed.id, kind=kind)


def _known_repos(
    known: AutomationSpec | Automation | None,
) -> tuple[RepoRef | None, RepoRef | None]:
    if known is None:
        return None, None
    if isinstance(known, Automation):
        return known.event_repo, known.action_repo
    return RepoRef(id=known.event_repo_id), RepoRef(id=known.action_repo_id)


def translate_automation(
    payload: AutomationPayload,
    *,
    known: AutomationSpec | Automation | None = None,
) -> Automation:
    event_repo, action_repo = _known_repos(known)
    return Automation(
        id=payload.id,
        name=_echoed(payload.name, known, "name", ""),
        event_id=_echoed(payload.event_id, known, "event_id", ""),
        action_id=_echoed(payload.action_id, known, "action_id", ""),
        event_repo=_repo_ref(payload.event_repo, event_repo),
        action_repo=_repo_ref(payload.action_repo, action_repo),
        # never echoed by the service
        event_params=getattr(known, "event_params", None),
        action_params=getattr(known, "action_params", None),
        condition=getattr(known, "condition", None),
        active=_echoed(payload.active, known, "active", None),
    )


def apply_changes[TState: RemoteState](current: TState, changes: dict[str, Any]) -> TState:
    """Return ``current`` with the transmitted attributes applied."""

    if isinstance(current, Automation) and "action_repo_id" in changes:
        changes = dict(changes)
        repo_id = changes.pop("action_repo_id")
        if repo_id != current.action_repo.id:
            changes["action_repo"] = RepoRef(id=repo_id)
    return replace(current, **changes)


__all__ = [
    "apply_changes",
    "translate_automation",
    "translate_field",
    "translate_phase",
    "translate_pipe",
]
