"""Shared pytest fixtures for openam-auth tests."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
from starlette.requests import Request

from openam_auth.auth.config import StrategyConfig
from openam_auth.auth.factory import clear_config_cache
from openam_auth.auth.mock import MOCK_BASE_URL, MockOpenAmClient

CALLBACK_URL = "https://app.example.test/auth/openam/callback"


def make_request(
    path: str = "/auth/openam/callback",
    query: str = "",
    *,
    cookie: str | None = None,
    host: str = "app.example.test",
    scheme: str = "https",
    headers: dict[str, str] | None = None,
) -> Request:
    """Build a Starlette request without running an ASGI app."""
    raw_headers = [(b"host", host.encode())]
    if cookie is not None:
        raw_headers.append((b"cookie", cookie.encode()))
    for name, value in (headers or {}).items():
        raw_headers.append((name.lower().encode(), value.encode()))
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": "GET",
        "scheme": scheme,
        "server": (host, 443 if scheme == "https" else 80),
        "root_path": "",
        "path": path,
        "query_string": query.encode(),
        "headers": raw_headers,
    }
    return Request(scope)


class RecordingHandler:
    """OutcomeHandler that records every channel invocation."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def redirect(self, location: str) -> None:
        self.calls.append(("redirect", (location,)))

    def success(self, user: Any, info: Any = None) -> None:
        self.calls.append(("success", (user, info)))

    def fail(self, info: Any = None) -> None:
        self.calls.append(("fail", (info,)))

    def error(self, cause: BaseException) -> None:
        self.calls.append(("error", (cause,)))


@pytest.fixture(autouse=True)
def _reset_caches() -> Iterator[None]:
    """Settings and the mock client singleton never leak between tests."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def mock_client() -> MockOpenAmClient:
    return MockOpenAmClient()


@pytest.fixture
def strategy_config() -> StrategyConfig:
    return StrategyConfig(base_url=MOCK_BASE_URL, callback_url=CALLBACK_URL)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()
