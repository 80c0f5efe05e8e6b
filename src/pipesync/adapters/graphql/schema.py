"""Pydantic models describing the GraphQL wire envelope."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class GraphQLBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GraphQLErrorItem(GraphQLBaseModel):
    message: str = ""
    path: list[str | int] | None = None


class GraphQLEnvelope(GraphQLBaseModel):
    data: dict[str, object] | None = None
    errors: list[GraphQLErrorItem] | None = None


def build_request_body(query: str, variables: dict[str, object] | None) -> dict[str, object]:
    """Serialise an operation; ``variables`` is left out when empty."""

    body: dict[str, object] = {"query": query}
    if variables:
        body["variables"] = variables
    return body
