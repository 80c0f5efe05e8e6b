"""Ports connecting the domain to remote services and storage."""

from __future__ import annotations

from .reconciling import Reconciler
from .state import StateStore
from .transport import GraphQLTransport

__all__ = ["GraphQLTransport", "Reconciler", "StateStore"]
