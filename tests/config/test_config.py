from __future__ import annotations

import pytest

from pipesync.config import (
    DEFAULT_PIPEFY_ENDPOINT,
    DEFAULT_PIPEFY_TOKEN_URL,
    ApiConfig,
    ClientCredentials,
    ConfigurationError,
    MissingConfigurationError,
    StaticToken,
    get_api_config,
    optional_env_var,
)


def test_optional_env_var_treats_blank_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "   ")

    assert optional_env_var("EXAMPLE_VAR") is None


def test_static_token_is_preferred(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIPEFY_TOKEN", " secret ")
    monkeypatch.setenv("PIPEFY_CLIENT_ID", "client")
    monkeypatch.setenv("PIPEFY_CLIENT_SECRET", "client-secret")

    config = get_api_config()

    assert config.endpoint == DEFAULT_PIPEFY_ENDPOINT
    assert config.credentials == StaticToken("secret")
    assert "secret" not in repr(config.credentials)


def test_client_credentials_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIPEFY_CLIENT_ID", "client")
    monkeypatch.setenv("PIPEFY_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("PIPEFY_ENDPOINT", "https://example.test/graphql")

    config = get_api_config()

    assert config.endpoint == "https://example.test/graphql"
    assert config.credentials == ClientCredentials(
        client_id="client",
        client_secret="client-secret",
        token_url=DEFAULT_PIPEFY_TOKEN_URL,
    )
    assert "client-secret" not in repr(config.credentials)


def test_explicit_arguments_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIPEFY_TOKEN", "from-env")

    config = get_api_config(endpoint="https://override.test/graphql", token="from-arg")

    assert config.endpoint == "https://override.test/graphql"
    assert config.credentials == StaticToken("from-arg")


def test_missing_credentials_name_the_variables() -> None:
    with pytest.raises(MissingConfigurationError) as exc:
        get_api_config()

    message = str(exc.value)
    assert "PIPEFY_TOKEN" in message
    assert "PIPEFY_CLIENT_ID" in message


def test_incomplete_client_credentials_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIPEFY_CLIENT_ID", "client")

    with pytest.raises(MissingConfigurationError):
        get_api_config()


def test_blank_endpoint_is_rejected() -> None:
    with pytest.raises(MissingConfigurationError):
        ApiConfig(endpoint="  ", credentials=StaticToken("token"))


def test_http_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PIPEFY_TOKEN", "token")
    monkeypatch.setenv("PIPEFY_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("PIPEFY_MAX_CALLS_PER_SECOND", "8")

    config = get_api_config()

    assert config.http.timeout_seconds == 12.5
    assert config.http.ratelimit is not None
    assert config.http.ratelimit.max_calls == 8
    assert config.http.ratelimit.per_seconds == 1.0


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PIPEFY_TIMEOUT_SECONDS", "soon"),
        ("PIPEFY_TIMEOUT_SECONDS", "0"),
        ("PIPEFY_MAX_CALLS_PER_SECOND", "0.5"),
    ],
)
def test_invalid_http_settings_are_rejected(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv("PIPEFY_TOKEN", "token")
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError) as exc:
        get_api_config()

    assert name in str(exc.value)
