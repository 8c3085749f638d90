"""OpenAM authentication strategy.

The strategy authenticates a request against an OpenAM session. Users
without a session (no ``code`` query parameter, no session cookie, or an
invalid token) are redirected to the OpenAM login UI, which sends them back
to the callback URL with ``?code=true`` once they have signed in. Requests
carrying a valid token get their user attributes fetched, normalized to a
Profile, and handed to the application's ``verify`` function, which decides
who the user is.

Applications supply ``verify(request, token, profile)`` returning
``(user, info)``, either directly or as an awaitable. ``user`` should be
falsy if the credentials are not acceptable. Raising signals an unexpected
error.

Example::

    async def verify(request, token, profile):
        user = await users.find_or_create(profile.username)
        return user, None

    strategy = OpenAmStrategy(
        StrategyConfig(
            base_url="https://sso.example.com/openam/",
            callback_url="https://app.example.com/auth/openam/callback",
        ),
        verify,
    )
"""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

from openam_auth.auth.config import resolve_skip_predicate
from openam_auth.auth.errors import OpenAmAuthError, OpenAmTransportError
from openam_auth.auth.models import (
    TRANSPORT_ERROR,
    AuthOutcome,
    ErrorOutcome,
    FailOutcome,
    Profile,
    RedirectOutcome,
    SuccessOutcome,
)
from openam_auth.auth.profile import normalize_profile
from openam_auth.auth.request import parse_cookie_header, resolve_callback_url

if TYPE_CHECKING:
    from openam_auth.auth.config import StrategyConfig
    from openam_auth.auth.protocol import (
        AuthRequest,
        OpenAmClientProtocol,
        OutcomeHandler,
        VerifyFunction,
    )

logger = logging.getLogger(__name__)


def dispatch(outcome: AuthOutcome, handler: OutcomeHandler) -> None:
    """Signal ``outcome`` through exactly one channel of ``handler``."""
    match outcome:
        case RedirectOutcome(location=location):
            handler.redirect(location)
        case SuccessOutcome(user=user, info=info):
            handler.success(user, info)
        case FailOutcome(info=info):
            handler.fail(info)
        case ErrorOutcome(cause=cause):
            handler.error(cause)


class OpenAmStrategy:
    """Authenticates requests using an OpenAM session cookie.

    Holds only the shared read-only configuration; all per-request state
    lives in the authenticate() coroutine, so one instance serves concurrent
    requests.
    """

    name = "openam"

    def __init__(
        self,
        config: StrategyConfig,
        verify: VerifyFunction,
        client: OpenAmClientProtocol | None = None,
    ) -> None:
        """Create a strategy.

        Args:
            config: Validated strategy configuration.
            verify: Application callback deciding the final user.
            client: Provider client; defaults to an OpenAmClient built from
                ``config``.
        """
        if client is None:
            from openam_auth.auth.client import OpenAmClient

            client = OpenAmClient(
                config.base_url,
                config.realm,
                config.cookie_name,
                timeout=config.timeout,
            )
        self._config = config
        self._verify = verify
        self._client = client
        self._skip_user_profile = resolve_skip_predicate(config.skip_user_profile)

    @property
    def config(self) -> StrategyConfig:
        return self._config

    @property
    def client(self) -> OpenAmClientProtocol:
        return self._client

    async def authenticate(
        self,
        request: AuthRequest,
        handler: OutcomeHandler | None = None,
        *,
        callback_url: str | None = None,
    ) -> AuthOutcome:
        """Authenticate ``request`` against the OpenAM session.

        Args:
            request: The inbound request.
            handler: If given, receives the outcome through exactly one of
                its channels.
            callback_url: Per-request override of the configured callback.

        Returns:
            The single outcome of this attempt.
        """
        outcome = await self._authenticate(request, callback_url)
        if handler is not None:
            dispatch(outcome, handler)
        return outcome

    async def _authenticate(
        self, request: AuthRequest, callback_url: str | None
    ) -> AuthOutcome:
        query = request.query_params
        if query.get("error"):
            # TODO: propagate error/error_description into the fail info once
            # callers agree on a shape for it.
            logger.warning(
                "Provider reported an error: %s (%s)",
                query.get("error"),
                query.get("error_description", ""),
            )
            return FailOutcome()

        callback = resolve_callback_url(
            request, callback_url or self._config.callback_url
        )

        if not query.get("code"):
            return self._login_redirect(callback)

        cookies = parse_cookie_header(request.headers.get("cookie"))
        token = cookies.get(self._config.cookie_name)
        if not token:
            logger.info("Callback without %s cookie", self._config.cookie_name)
            return self._login_redirect(callback)

        try:
            session = await self._client.validate_session(token)
        except OpenAmAuthError as e:
            return ErrorOutcome(e)
        except Exception as e:
            logger.warning("Token validation raised: %s", e)
            return ErrorOutcome(OpenAmTransportError("failed to validate token", e))
        if session.error == TRANSPORT_ERROR:
            return ErrorOutcome(
                OpenAmTransportError(f"failed to validate token: {session.detail}")
            )
        if not session.valid:
            logger.info("Session token (length=%d) is not valid", len(token))
            return self._login_redirect(callback)

        try:
            profile = await self._load_user_profile(token)
        except Exception as e:
            logger.warning("Failed to load user profile: %s", e)
            return ErrorOutcome(e)

        try:
            result = self._verify(request, token, profile)
            if inspect.isawaitable(result):
                result = await result
            user, info = result
        except Exception as e:
            logger.exception("verify callback raised")
            return ErrorOutcome(e)

        if not user:
            return FailOutcome(info)
        return SuccessOutcome(user, info)

    def _login_redirect(self, callback_url: str) -> RedirectOutcome:
        location = self._client.get_login_ui_url({"goto": f"{callback_url}?code=true"})
        logger.debug("Redirecting to login: %s", location)
        return RedirectOutcome(location)

    async def _load_user_profile(self, token: str) -> Profile | None:
        """Load the user profile unless skip_user_profile says not to."""
        if await self._skip_user_profile(token):
            return None
        return await self.user_profile(token)

    async def user_profile(self, token: str) -> Profile:
        """Retrieve and normalize the profile of the token's owner.

        Raises:
            OpenAmTransportError: If the attribute fetch failed.
            ProfileMappingError: If the attributes could not be mapped.
        """
        try:
            attributes = await self._client.get_attributes(token)
        except OpenAmAuthError:
            raise
        except Exception as e:
            msg = "failed to get attributes"
            raise OpenAmTransportError(msg, e) from e
        return normalize_profile(attributes)
