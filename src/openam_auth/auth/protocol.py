"""Protocols defining the seams of the authentication strategy.

OpenAmClient and MockOpenAmClient both implement OpenAmClientProtocol,
allowing them to be used interchangeably. OutcomeHandler is what the host
middleware passes to each authenticate() call to receive the result.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from openam_auth.auth.models import Profile, SessionResult


class OpenAmClientProtocol(Protocol):
    """Protocol for identity provider clients.

    This defines the interface that both the real OpenAM client
    and the mock client must implement.
    """

    async def validate_session(self, token: str) -> SessionResult:
        """Ask the provider whether a session token is valid.

        Never raises: transport failures are reported through
        SessionResult.error.
        """
        ...

    async def is_token_valid(self, token: str) -> bool:
        """Return True if the session token is currently valid.

        Never raises: an unreachable provider counts as invalid.
        """
        ...

    async def get_attributes(self, token: str) -> dict[str, str]:
        """Fetch the attributes of the user owning the session token.

        Raises:
            OpenAmTransportError: If the provider could not be queried.
        """
        ...

    def get_login_ui_url(self, params: Mapping[str, str]) -> str:
        """Build the provider's interactive login URL.

        Args:
            params: Query parameters to add; must include ``goto``.
        """
        ...


class OutcomeHandler(Protocol):
    """Receives the single terminal outcome of an authentication attempt."""

    def redirect(self, location: str) -> None: ...

    def success(self, user: Any, info: Any = None) -> None: ...

    def fail(self, info: Any = None) -> None: ...

    def error(self, cause: BaseException) -> None: ...


class RequestURL(Protocol):
    """The parts of a request URL the strategy needs."""

    scheme: str
    netloc: str
    path: str


class AuthRequest(Protocol):
    """Minimal view of an inbound HTTP request.

    ``starlette.requests.Request`` satisfies this protocol.
    """

    @property
    def query_params(self) -> Mapping[str, str]: ...

    @property
    def headers(self) -> Mapping[str, str]: ...

    @property
    def url(self) -> RequestURL: ...


# verify(request, token, profile) -> (user, info), sync or async
type VerifyResult = tuple[Any, Any]
type VerifyFunction = Callable[
    [AuthRequest, str, Profile | None],
    Awaitable[VerifyResult] | VerifyResult,
]
