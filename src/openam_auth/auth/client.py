"""OpenAM identity service client.

This module talks to the legacy OpenAM identity REST services over httpx
and implements the OpenAmClientProtocol: token validation, attribute
retrieval and login URL construction.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Self
from urllib.parse import urlencode

import httpx

from openam_auth.auth.errors import OpenAmTransportError
from openam_auth.auth.models import INVALID_TOKEN, TRANSPORT_ERROR, SessionResult

logger = logging.getLogger(__name__)

# Endpoint paths relative to the deployment base URL
IS_TOKEN_VALID_PATH = "identity/isTokenValid"
ATTRIBUTES_PATH = "identity/attributes"
LOGIN_UI_PATH = "UI/Login"

_TOKEN_ID_KEY = "userdetails.token.id"
_ATTRIBUTE_NAME_KEY = "userdetails.attribute.name"
_ATTRIBUTE_VALUE_KEY = "userdetails.attribute.value"

# Request failures that never produced a usable response
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError)


def _parse_attributes(body: str) -> dict[str, str]:
    """Parse an ``identity/attributes`` response body.

    The body is a sequence of ``key=value`` lines where each
    ``userdetails.attribute.name`` line is followed by one or more
    ``userdetails.attribute.value`` lines. The token id is exposed as
    ``tokenid``. Multi-valued attributes keep their first value.

    Args:
        body: Raw response text.

    Returns:
        Mapping of attribute name to value.
    """
    attributes: dict[str, str] = {}
    current: str | None = None
    for line in body.splitlines():
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key == _TOKEN_ID_KEY:
            attributes["tokenid"] = value
        elif key == _ATTRIBUTE_NAME_KEY:
            current = value
        elif key == _ATTRIBUTE_VALUE_KEY and current is not None:
            attributes.setdefault(current, value)
    return attributes


class OpenAmClient:
    """Async client for an OpenAM deployment.

    Either owns a short-lived ``httpx.AsyncClient`` per call or uses the
    one passed in, so a host application can share its connection pool.
    Every call is bounded by ``timeout``.
    """

    def __init__(
        self,
        base_url: str,
        realm: str = "/",
        cookie_name: str = "iPlanetDirectoryPro",
        *,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: OpenAM deployment URL, with or without trailing slash.
            realm: Realm used for the login UI.
            cookie_name: Name of the provider's session cookie.
            timeout: Seconds allowed for each provider call.
            http_client: Optional shared httpx client. Not closed by us.
            transport: Optional httpx transport for self-created clients.
        """
        self._base_url = base_url.rstrip("/") + "/"
        self._realm = realm
        self._cookie_name = cookie_name
        self._timeout = httpx.Timeout(timeout)
        self._http_client = http_client
        self._transport = transport
        self._owns_client = False

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    async def __aenter__(self) -> Self:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            )
            self._owns_client = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the httpx client if this instance created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
            self._owns_client = False

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            yield client

    async def _post(self, path: str, data: Mapping[str, str]) -> httpx.Response:
        async with self._client() as client:
            return await client.post(
                f"{self._base_url}{path}", data=data, timeout=self._timeout
            )

    async def validate_session(self, token: str) -> SessionResult:
        """Ask the provider whether a session token is valid.

        Args:
            token: The session token from the provider cookie.

        Returns:
            SessionResult; never raises.
        """
        try:
            response = await self._post(IS_TOKEN_VALID_PATH, {"tokenid": token})
        except _REQUEST_ERRORS as e:
            logger.warning(
                "Token validation request failed",
                extra={"error_type": type(e).__name__},
            )
            return SessionResult(valid=False, error=TRANSPORT_ERROR, detail=str(e))

        if response.status_code == 401:
            logger.debug("Token rejected with HTTP 401")
            return SessionResult(valid=False, error=INVALID_TOKEN, detail="HTTP 401")
        if response.status_code != 200:
            logger.warning(
                "Token validation failed with HTTP %d", response.status_code
            )
            return SessionResult(
                valid=False,
                error=TRANSPORT_ERROR,
                detail=f"HTTP {response.status_code}",
            )

        key, _, value = response.text.strip().partition("=")
        valid = key.strip() == "boolean" and value.strip().lower() == "true"
        logger.debug("Token (length=%d) valid=%s", len(token), valid)
        return SessionResult(valid=valid)

    async def is_token_valid(self, token: str) -> bool:
        """Return True if the session token is currently valid."""
        result = await self.validate_session(token)
        return result.valid

    async def get_attributes(self, token: str) -> dict[str, str]:
        """Fetch the attributes of the user owning the session token.

        Args:
            token: A validated session token.

        Returns:
            Mapping of attribute name to value, including ``tokenid``.

        Raises:
            OpenAmTransportError: On network failure or a non-200 answer.
        """
        try:
            response = await self._post(ATTRIBUTES_PATH, {"subjectid": token})
        except _REQUEST_ERRORS as e:
            msg = "failed to get attributes"
            raise OpenAmTransportError(msg, e) from e

        if response.status_code != 200:
            msg = f"failed to get attributes (HTTP {response.status_code})"
            raise OpenAmTransportError(msg)

        return _parse_attributes(response.text)

    def get_login_ui_url(self, params: Mapping[str, str]) -> str:
        """Build the provider's interactive login URL.

        Args:
            params: Query parameters to add; must include ``goto``.

        Returns:
            ``<base>/UI/Login?realm=<realm>&goto=...``
        """
        if "goto" not in params:
            msg = "login UI URL requires a 'goto' parameter"
            raise ValueError(msg)
        query = urlencode({"realm": self._realm, **params})
        return f"{self._base_url}{LOGIN_UI_PATH}?{query}"
