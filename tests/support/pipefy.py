"""Fakes for exercising the Pipefy reconcilers without a network."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from pipesync.app import PipefySession
from pipesync.config import ApiConfig, HttpClientConfig, StaticToken

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from pydantic import BaseModel

ENDPOINT = "https://pipefy.test/graphql"
API_CONFIG = ApiConfig(
    endpoint=ENDPOINT,
    credentials=StaticToken("test-token"),
    http=HttpClientConfig(name="pipefy-test", timeout_seconds=5.0),
)

type Responder = Callable[[dict[str, Any]], object]


@dataclass(frozen=True, slots=True)
class RecordedCall:
    query: str
    variables: dict[str, Any]
    headers: httpx.Headers


@dataclass
class FakePipefyBackend:
    """Answers GraphQL documents from registered responders and records every call.

    A responder is registered per query document. It is either an ``httpx.Response``
    returned as is, a mapping used as the ``data`` member of the envelope, or a
    callable receiving the request variables and returning one of those.
    Documents without a responder are answered with HTTP 500.
    """

    calls: list[RecordedCall] = field(default_factory=list["RecordedCall"])
    _responders: dict[str, object] = field(default_factory=dict)

    def on(self, query: str, response: object) -> FakePipefyBackend:
        self._responders[query] = response
        return self

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def queries(self) -> list[str]:
        return [call.query for call in self.calls]

    def calls_for(self, query: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.query == query]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        call = RecordedCall(
            query=body["query"],
            variables=body.get("variables", {}),
            headers=request.headers,
        )
        self.calls.append(call)

        responder = self._responders.get(call.query)
        if responder is None:
            return httpx.Response(500, text=f"no responder for {call.query}")
        if callable(responder):
            responder = responder(call.variables)
        if isinstance(responder, httpx.Response):
            return responder
        return httpx.Response(200, json={"data": responder})


def run_session[T](
    backend: FakePipefyBackend,
    action: Callable[[PipefySession], Awaitable[T]],
) -> T:
    async def scenario() -> T:
        async with PipefySession(API_CONFIG, transport=backend.transport) as session:
            return await action(session)

    return asyncio.run(scenario())


class RecordingTransport:
    """GraphQL transport double that records arrivals and blocks until released.

    ``events`` lists ``("start", label)`` and ``("end", label)`` in the order they
    happen. With ``delay`` set, calls sleep instead of waiting for ``release``.
    """

    def __init__(
        self,
        respond: Callable[[str, Mapping[str, Any]], Mapping[str, Any]],
        *,
        label: Callable[[Mapping[str, Any]], str],
        delay: float | None = None,
    ) -> None:
        self._respond = respond
        self._label = label
        self._delay = delay
        self._gate = asyncio.Event()
        self.events: list[tuple[str, str]] = []

    def started(self) -> list[str]:
        return [label for kind, label in self.events if kind == "start"]

    def release(self) -> None:
        self._gate.set()

    async def execute[TResult: BaseModel](
        self,
        query: str,
        variables: Mapping[str, Any] | None = None,
        *,
        result: type[TResult] | None = None,
        operation: str | None = None,
        deadline: float | None = None,
    ) -> TResult | None:
        del operation, deadline
        variables = variables or {}
        label = self._label(variables)
        self.events.append(("start", label))
        if self._delay is not None:
            await asyncio.sleep(self._delay)
        else:
            await self._gate.wait()
        self.events.append(("end", label))
        if result is None:
            return None
        return result.model_validate(self._respond(query, variables))


async def settle(rounds: int = 10) -> None:
    """Let every runnable task advance until it blocks."""

    for _ in range(rounds):
        await asyncio.sleep(0)
