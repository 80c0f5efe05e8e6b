"""Bearer authentication for the GraphQL channel.

Both flows attach ``Authorization: Bearer <token>`` at the channel level, so the
transport never sees or refreshes a token itself.
"""

from __future__ import annotations

import asyncio
import time
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from pipesync.config.api import StaticToken
from pipesync.domain.errors import DecodeError, HTTPStatusError, TransportError, preview_body

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Generator

    from pipesync.config.api import ClientCredentials, Credentials

log = getLogger(__name__)

TOKEN_REFRESH_MARGIN_SECONDS = 30.0
TOKEN_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_TOKEN_LIFETIME_SECONDS = 3600


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: int = DEFAULT_TOKEN_LIFETIME_SECONDS


class BearerTokenAuth(httpx.Auth):
    """Attach a fixed token to every request."""

    def __init__(self, token: str) -> None:
        self._token = token

    def __repr__(self) -> str:
        return f"<{type(self).__name__} token=***>"

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request


class ClientCredentialsAuth(httpx.Auth):
    """OAuth2 client-credentials flow with a shared, lazily refreshed token.

    The token is cached until shortly before it expires. Concurrent requests
    that find it stale wait on one refresh instead of each fetching their own.
    A 401 answer forces one refresh and one resend of the request.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._credentials = credentials
        self._transport = transport
        self._clock = clock
        self._access_token: str | None = None
        self._expires_at = 0.0
        self._refresh_lock = asyncio.Lock()

    def __repr__(self) -> str:
        has_token = self._access_token is not None
        client_id = self._credentials.client_id
        return f"<{type(self).__name__} client_id={client_id!r} token_active={has_token}>"

    def sync_auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        raise RuntimeError("ClientCredentialsAuth only supports asynchronous clients")

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self.ensure_token()
        request.headers["Authorization"] = f"Bearer {token}"
        response = yield request

        if response.status_code == httpx.codes.UNAUTHORIZED:
            log.debug("Access token rejected; refreshing once")
            token = await self.ensure_token(rejected=token)
            request.headers["Authorization"] = f"Bearer {token}"
            yield request

    def _token_is_fresh(self, rejected: str | None) -> bool:
        return (
            self._access_token is not None
            and self._access_token != rejected
            and self._clock() < self._expires_at - TOKEN_REFRESH_MARGIN_SECONDS
        )

    async def ensure_token(self, *, rejected: str | None = None) -> str:
        """Return a usable access token, fetching a new one when needed."""

        if self._token_is_fresh(rejected):
            return self._access_token  # type: ignore[return-value]

        async with self._refresh_lock:
            # another task may have refreshed while we waited
            if not self._token_is_fresh(rejected):
                token = await self._fetch_token()
                self._access_token = token.access_token
                self._expires_at = self._clock() + token.expires_in
                log.debug("Access token refreshed, expires in %ss", token.expires_in)
            return self._access_token  # type: ignore[return-value]

    async def _fetch_token(self) -> TokenResponse:
        data = {
            "grant_type": "client_credentials",
            "client_id": self._credentials.client_id,
            "client_secret": self._credentials.client_secret,
        }
        if self._credentials.scopes:
            data["scope"] = " ".join(self._credentials.scopes)

        operation = "fetch access token"
        try:
            async with httpx.AsyncClient(
                transport=self._transport, timeout=TOKEN_REQUEST_TIMEOUT_SECONDS
            ) as client:
                response = await client.post(
                    self._credentials.token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            # the exception text may echo the request; keep only its type
            raise TransportError(
                f"token request failed: {type(exc).__name__}", operation=operation
            ) from None

        if not response.is_success:
            raise HTTPStatusError(
                response.status_code,
                content_type=response.headers.get("content-type"),
                body=preview_body(response.text),
                operation=operation,
            )

        try:
            return TokenResponse.model_validate_json(response.content)
        except ValidationError:
            raise DecodeError(
                "token endpoint returned no usable access_token",
                preview=None,
                operation=operation,
            ) from None


def build_auth(
    credentials: Credentials,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.Auth:
    """Return the channel-level auth for the configured credentials."""

    if isinstance(credentials, StaticToken):
        return BearerTokenAuth(credentials.token)
    return ClientCredentialsAuth(credentials, transport=transport)


__all__ = ["BearerTokenAuth", "ClientCredentialsAuth", "TokenResponse", "build_auth"]
