"""Application configuration helpers."""

from __future__ import annotations

from .api import (
    DEFAULT_PIPEFY_ENDPOINT,
    DEFAULT_PIPEFY_TOKEN_URL,
    ApiConfig,
    ClientCredentials,
    Credentials,
    StaticToken,
    get_api_config,
)
from .env import optional_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .http import HttpClientConfig, RateLimit
from .logging import configure_logging

__all__ = [
    "DEFAULT_PIPEFY_ENDPOINT",
    "DEFAULT_PIPEFY_TOKEN_URL",
    "ApiConfig",
    "ClientCredentials",
    "ConfigurationError",
    "Credentials",
    "HttpClientConfig",
    "MissingConfigurationError",
    "RateLimit",
    "StaticToken",
    "configure_logging",
    "get_api_config",
    "optional_env_var",
]
