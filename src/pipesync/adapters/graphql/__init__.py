"""Public interface for the GraphQL transport."""

from __future__ import annotations

from .client import GraphQLClient
from .schema import GraphQLEnvelope, GraphQLErrorItem, build_request_body

__all__ = [
    "GraphQLClient",
    "GraphQLEnvelope",
    "GraphQLErrorItem",
    "build_request_body",
]
