"""Unit tests for MockOpenAmClient.

These tests verify the mock client behaves correctly
with its predefined test values.
"""

from __future__ import annotations

import pytest

from openam_auth.auth.errors import OpenAmTransportError
from openam_auth.auth.mock import (
    MOCK_ATTRIBUTES,
    MOCK_BASE_URL,
    MOCK_UNREACHABLE_TOKEN,
    MOCK_VALID_TOKEN,
    MockOpenAmClient,
)
from openam_auth.auth.models import INVALID_TOKEN, TRANSPORT_ERROR


class TestMockValidateSession:
    """Tests for MockOpenAmClient.validate_session."""

    async def test_valid_token(self, mock_client):
        result = await mock_client.validate_session(MOCK_VALID_TOKEN)

        assert result.valid is True
        assert result.error is None

    async def test_unknown_token(self, mock_client):
        result = await mock_client.validate_session("who-knows")

        assert result.valid is False
        assert result.error == INVALID_TOKEN

    async def test_unreachable_token(self, mock_client):
        result = await mock_client.validate_session(MOCK_UNREACHABLE_TOKEN)

        assert result.error == TRANSPORT_ERROR

    async def test_records_calls(self, mock_client):
        await mock_client.is_token_valid("a")
        await mock_client.is_token_valid(MOCK_VALID_TOKEN)

        assert mock_client.validation_calls == ["a", MOCK_VALID_TOKEN]

    async def test_revoke(self, mock_client):
        mock_client.revoke(MOCK_VALID_TOKEN)

        assert await mock_client.is_token_valid(MOCK_VALID_TOKEN) is False


class TestMockGetAttributes:
    """Tests for MockOpenAmClient.get_attributes."""

    async def test_default_user(self, mock_client):
        attributes = await mock_client.get_attributes(MOCK_VALID_TOKEN)

        assert attributes == MOCK_ATTRIBUTES
        assert mock_client.attribute_calls == [MOCK_VALID_TOKEN]

    async def test_returns_copy(self, mock_client):
        attributes = await mock_client.get_attributes(MOCK_VALID_TOKEN)
        attributes["uid"] = "changed"

        assert (await mock_client.get_attributes(MOCK_VALID_TOKEN))["uid"] == "demo"

    async def test_added_session_gets_tokenid(self):
        client = MockOpenAmClient(sessions={"tok-bob": {"uid": "bob"}})

        attributes = await client.get_attributes("tok-bob")

        assert attributes == {"tokenid": "tok-bob", "uid": "bob"}

    async def test_unknown_token_raises(self, mock_client):
        with pytest.raises(OpenAmTransportError):
            await mock_client.get_attributes("nope")


class TestMockLoginUrl:
    def test_login_url(self, mock_client):
        url = mock_client.get_login_ui_url({"goto": "https://app/cb?code=true"})

        assert url.startswith(f"{MOCK_BASE_URL}UI/Login?realm=%2F&goto=")

    def test_requires_goto(self, mock_client):
        with pytest.raises(ValueError):
            mock_client.get_login_ui_url({"next": "/"})
