"""Port for issuing GraphQL operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, overload, runtime_checkable

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Mapping


@runtime_checkable
class GraphQLTransport(Protocol):
    """Executes one GraphQL operation and returns the decoded ``data`` payload.

    Implementations raise the classified errors from ``pipesync.domain.errors``.
    When ``result`` is omitted a successful response without data is accepted and
    ``None`` is returned.
    """

    @overload
    async def execute[TResult: BaseModel](
        self,
        query: str,
        variables: Mapping[str, object] | None = None,
        *,
        result: type[TResult],
        operation: str | None = None,
        deadline: float | None = None,
    ) -> TResult: ...

    @overload
    async def execute(
        self,
        query: str,
        variables: Mapping[str, object] | None = None,
        *,
        result: None = None,
        operation: str | None = None,
        deadline: float | None = None,
    ) -> None: ...

    async def execute[TResult: BaseModel](
        self,
        query: str,
        variables: Mapping[str, object] | None = None,
        *,
        result: type[TResult] | None = None,
        operation: str | None = None,
        deadline: float | None = None,
    ) -> TResult | None: ...


__all__ = ["GraphQLTransport"]
