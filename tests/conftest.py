from __future__ import annotations

import pytest

from tests.support.pipefy import FakePipefyBackend

_PIPEFY_ENV = (
    "PIPEFY_ENDPOINT",
    "PIPEFY_TOKEN",
    "PIPEFY_CLIENT_ID",
    "PIPEFY_CLIENT_SECRET",
    "PIPEFY_TOKEN_URL",
    "PIPEFY_TIMEOUT_SECONDS",
    "PIPEFY_MAX_CALLS_PER_SECOND",
)


@pytest.fixture(autouse=True)
def clean_pipefy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _PIPEFY_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def backend() -> FakePipefyBackend:
    return FakePipefyBackend()
