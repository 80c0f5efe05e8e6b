"""Pipefy reconcilers."""

from __future__ import annotations

from .automations import AutomationReconciler
from .base import PipefyReconciler, error_context
from .compensation import remove_default_phases, resolve_pipe_uuid
from .fields import FieldReconciler
from .phases import PhaseReconciler
from .pipes import PipeReconciler

__all__ = [
    "AutomationReconciler",
    "FieldReconciler",
    "PhaseReconciler",
    "PipeReconciler",
    "PipefyReconciler",
    "error_context",
    "remove_default_phases",
    "resolve_pipe_uuid",
]
