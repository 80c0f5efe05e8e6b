"""Pipefy API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import float_env_var, optional_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .http import DEFAULT_TIMEOUT_SECONDS, HttpClientConfig, RateLimit

DEFAULT_PIPEFY_ENDPOINT = "https://api.pipefy.com/graphql"
DEFAULT_PIPEFY_TOKEN_URL = "https://app.pipefy.com/oauth/token"


@dataclass(frozen=True, slots=True)
class StaticToken:
    """A fixed bearer token attached to every request."""

    token: str

    def __repr__(self) -> str:
        return "StaticToken(token=***)"


@dataclass(frozen=True, slots=True)
class ClientCredentials:
    """Service-account credentials exchanged for short-lived bearer tokens."""

    client_id: str
    client_secret: str
    token_url: str = DEFAULT_PIPEFY_TOKEN_URL
    scopes: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"ClientCredentials(client_id={self.client_id!r}, token_url={self.token_url!r})"


type Credentials = StaticToken | ClientCredentials


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Everything needed to build an authenticated GraphQL channel."""

    endpoint: str
    credentials: Credentials
    http: HttpClientConfig = field(default_factory=lambda: HttpClientConfig(name="pipefy"))

    def __post_init__(self) -> None:
        if not self.endpoint or not self.endpoint.strip():
            raise MissingConfigurationError("Missing configuration for: endpoint")


def get_api_config(
    *,
    endpoint: str | None = None,
    token: str | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
    token_url: str | None = None,
) -> ApiConfig:
    """Build the API configuration, preferring explicit arguments over the environment.

    A static token wins over client credentials when both are present.
    """

    endpoint = endpoint or optional_env_var("PIPEFY_ENDPOINT") or DEFAULT_PIPEFY_ENDPOINT
    token = token or optional_env_var("PIPEFY_TOKEN")
    client_id = client_id or optional_env_var("PIPEFY_CLIENT_ID")
    client_secret = client_secret or optional_env_var("PIPEFY_CLIENT_SECRET")
    token_url = token_url or optional_env_var("PIPEFY_TOKEN_URL") or DEFAULT_PIPEFY_TOKEN_URL

    credentials: Credentials
    if token:
        credentials = StaticToken(token=token)
    elif client_id and client_secret:
        credentials = ClientCredentials(
            client_id=client_id,
            client_secret=client_secret,
            token_url=token_url,
        )
    else:
        raise MissingConfigurationError(
            "Missing configuration for: PIPEFY_TOKEN "
            "(or PIPEFY_CLIENT_ID and PIPEFY_CLIENT_SECRET)"
        )

    return ApiConfig(endpoint=endpoint, credentials=credentials, http=_http_config_from_env())


def _http_config_from_env() -> HttpClientConfig:
    timeout = float_env_var("PIPEFY_TIMEOUT_SECONDS")
    if timeout is not None and timeout <= 0:
        raise ConfigurationError("PIPEFY_TIMEOUT_SECONDS must be positive")

    ratelimit: RateLimit | None = None
    max_calls = float_env_var("PIPEFY_MAX_CALLS_PER_SECOND")
    if max_calls is not None:
        if max_calls < 1:
            raise ConfigurationError("PIPEFY_MAX_CALLS_PER_SECOND must be at least 1")
        ratelimit = RateLimit(max_calls=int(max_calls), per_seconds=1.0)

    return HttpClientConfig(
        name="pipefy",
        timeout_seconds=timeout if timeout is not None else DEFAULT_TIMEOUT_SECONDS,
        ratelimit=ratelimit,
    )
