"""Mock OpenAM client for testing.

This module provides an in-memory implementation of the OpenAmClientProtocol
that can be used in tests and local development without an OpenAM server.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlencode

from openam_auth.auth.errors import OpenAmTransportError
from openam_auth.auth.models import INVALID_TOKEN, TRANSPORT_ERROR, SessionResult

# Predefined test values for consistent behavior in tests
MOCK_BASE_URL = "https://sso.example.test/openam/"
MOCK_VALID_TOKEN = "mock-valid-token"
MOCK_UNREACHABLE_TOKEN = "mock-unreachable-token"
MOCK_ATTRIBUTES: dict[str, str] = {
    "tokenid": MOCK_VALID_TOKEN,
    "uid": "demo",
    "cn": "Demo User",
    "sn": "User",
    "givenname": "Demo",
    "mail": "demo@example.test",
}


class MockOpenAmClient:
    """Mock implementation of OpenAmClientProtocol for testing.

    Token Formats:
        - "mock-valid-token" - valid, owned by the demo user
        - "mock-unreachable-token" - behaves as if the provider is down
        - any token registered with add_session() - valid
        - anything else - invalid

    Calls are recorded so tests can assert how often the provider was asked.
    """

    def __init__(
        self,
        sessions: Mapping[str, Mapping[str, str]] | None = None,
        *,
        base_url: str = MOCK_BASE_URL,
        realm: str = "/",
    ) -> None:
        """Initialize the mock client.

        Args:
            sessions: Extra token -> attributes mapping of valid sessions.
            base_url: Base URL used when building login URLs.
            realm: Realm used when building login URLs.
        """
        self._base_url = base_url.rstrip("/") + "/"
        self._realm = realm
        self._sessions: dict[str, dict[str, str]] = {
            MOCK_VALID_TOKEN: dict(MOCK_ATTRIBUTES)
        }
        for token, attributes in (sessions or {}).items():
            self.add_session(token, attributes)
        self.validation_calls: list[str] = []
        self.attribute_calls: list[str] = []

    def add_session(self, token: str, attributes: Mapping[str, str]) -> None:
        """Register a valid session token with its user attributes."""
        self._sessions[token] = {"tokenid": token, **attributes}

    def revoke(self, token: str) -> None:
        """Forget a session token, making it invalid."""
        self._sessions.pop(token, None)

    async def validate_session(self, token: str) -> SessionResult:
        self.validation_calls.append(token)
        if token == MOCK_UNREACHABLE_TOKEN:
            return SessionResult(
                valid=False, error=TRANSPORT_ERROR, detail="mock provider down"
            )
        if token in self._sessions:
            return SessionResult(valid=True)
        return SessionResult(valid=False, error=INVALID_TOKEN)

    async def is_token_valid(self, token: str) -> bool:
        result = await self.validate_session(token)
        return result.valid

    async def get_attributes(self, token: str) -> dict[str, str]:
        self.attribute_calls.append(token)
        try:
            return dict(self._sessions[token])
        except KeyError as e:
            msg = "failed to get attributes"
            raise OpenAmTransportError(msg, e) from e

    def get_login_ui_url(self, params: Mapping[str, str]) -> str:
        if "goto" not in params:
            msg = "login UI URL requires a 'goto' parameter"
            raise ValueError(msg)
        query = urlencode({"realm": self._realm, **params})
        return f"{self._base_url}UI/Login?{query}"
