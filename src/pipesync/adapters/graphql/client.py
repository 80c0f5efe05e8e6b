"""HTTP transport for GraphQL operations."""

from __future__ import annotations

import asyncio
import json
import re
from logging import getLogger
from typing import TYPE_CHECKING, overload

import httpx
from pydantic import BaseModel, ValidationError

from pipesync.config.errors import MissingConfigurationError
from pipesync.domain.errors import (
    ApplicationError,
    DecodeError,
    HTTPStatusError,
    OperationCancelledError,
    TransportError,
    preview_body,
)

from .schema import GraphQLEnvelope, build_request_body

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pipesync.adapters.http_client import ApiHttpClient

log = getLogger(__name__)

_REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}
_FIELD_NAME = re.compile(r"\{\s*([A-Za-z_][A-Za-z0-9_]*)")


def _operation_label(query: str) -> str:
    match = _FIELD_NAME.search(query)
    return match.group(1) if match else "graphql"


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<root>"
    return f"{location}: {first['msg']}"


class GraphQLClient:
    """Issue operations against one GraphQL endpoint and classify the outcome.

    Outcomes are checked in a fixed order: network failure, HTTP status, envelope
    decoding, application errors, missing data, and finally decoding ``data``
    into the caller's result model. Nothing is cached or retried.
    """

    def __init__(self, *, endpoint: str, http: ApiHttpClient | None) -> None:
        self._endpoint = endpoint
        self._http = http

    @property
    def endpoint(self) -> str:
        return self._endpoint

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
    ) -> TResult | None:
        """Run ``query`` and decode its ``data`` into ``result``.

        ``deadline`` is an absolute ``loop.time()`` value. When it passes, the
        in-flight request is abandoned and ``OperationCancelledError`` raised.
        """

        if not self._endpoint:
            raise MissingConfigurationError("Missing configuration for: endpoint")
        if self._http is None:
            raise MissingConfigurationError("Missing configuration for: http channel")

        label = operation or _operation_label(query)
        body = build_request_body(query, dict(variables) if variables else None)
        log.debug("GraphQL %s -> %s", label, self._endpoint)

        try:
            async with asyncio.timeout_at(deadline):
                response = await self._http.post(
                    self._endpoint, json=body, headers=_REQUEST_HEADERS
                )
        except TimeoutError:
            raise OperationCancelledError(
                f"deadline exceeded before {label} completed"
            ) from None
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

        return self._classify(response, result=result)

    def _classify[TResult: BaseModel](
        self,
        response: httpx.Response,
        *,
        result: type[TResult] | None,
    ) -> TResult | None:
        text = response.text
        if not response.is_success:
            raise HTTPStatusError(
                response.status_code,
                content_type=response.headers.get("content-type"),
                body=text,
            )

        try:
            payload = json.loads(text)
            envelope = GraphQLEnvelope.model_validate(payload)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                f"failed to parse JSON response (status {response.status_code}): {exc}",
                preview=preview_body(text),
            ) from None
        except ValidationError as exc:
            raise DecodeError(
                f"unexpected response envelope (status {response.status_code}): "
                f"{_describe_validation_error(exc)}",
                preview=preview_body(text),
            ) from None

        if envelope.errors:
            details = [error.model_dump() for error in envelope.errors]
            raise ApplicationError(envelope.errors[0].message, details=details)

        if result is None:
            return None
        if not envelope.data:
            raise DecodeError("graphql response missing data")

        try:
            return result.model_validate(envelope.data)
        except ValidationError as exc:
            raise DecodeError(
                f"unexpected response data: {_describe_validation_error(exc)}",
                preview=preview_body(text),
            ) from None


__all__ = ["GraphQLClient"]
