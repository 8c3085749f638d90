"""Strategy configuration.

StrategyConfig is built once at process start, either directly from the
classic option names or from the pydantic Settings, and shared read-only by
every request.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from openam_auth.auth.errors import ConfigurationError

if TYPE_CHECKING:
    from openam_auth.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_REALM = "/"
DEFAULT_COOKIE_NAME = "iPlanetDirectoryPro"
DEFAULT_TIMEOUT_SECONDS = 10.0

type SkipUserProfile = (
    bool | Callable[[], bool] | Callable[[str], bool | Awaitable[bool]]
)
type SkipPredicate = Callable[[str], Awaitable[bool]]

# Classic option names accepted by from_options()
_OPTION_NAMES = {
    "openAmBaseUrl": "base_url",
    "callbackUrl": "callback_url",
    "openAmRealm": "realm",
    "openAmCookieName": "cookie_name",
    "skipUserProfile": "skip_user_profile",
    "openAmLoginPage": "login_page",
    "timeout": "timeout",
}


@dataclass(frozen=True)
class StrategyConfig:
    """Configuration for the OpenAM authentication strategy.

    Attributes:
        base_url: OpenAM deployment URL, e.g. ``https://sso.example.com/openam/``.
        callback_url: Where the provider sends the user after login. May be
            relative to the request being authenticated.
        realm: Provider realm the tokens live in.
        cookie_name: Name of the session cookie set by the provider.
        skip_user_profile: Whether to skip the attribute fetch. Either a
            bool, a sync callable, or an async callable taking the token.
        login_page: Whether the provider login UI is used. Informational.
        timeout: Seconds to wait for any single provider call.
    """

    base_url: str
    callback_url: str
    realm: str = DEFAULT_REALM
    cookie_name: str = DEFAULT_COOKIE_NAME
    skip_user_profile: SkipUserProfile = False
    login_page: bool = True
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate configuration and fail fast on misconfigurations.

        Raises:
            ConfigurationError: If a required option is missing or an option
                has an unusable value.
        """
        errors: list[str] = []

        if not self.base_url:
            errors.append("OpenAmStrategy requires a base_url (openAmBaseUrl)")
        if not self.callback_url:
            errors.append("OpenAmStrategy requires a callback_url (callbackUrl)")
        if not self.cookie_name:
            errors.append("cookie_name must not be empty")
        if self.timeout <= 0:
            errors.append("timeout must be positive")
        if not isinstance(self.skip_user_profile, bool) and not callable(
            self.skip_user_profile
        ):
            errors.append("skip_user_profile must be a bool or a callable")

        if errors:
            error_msg = "OpenAM strategy configuration errors:\n" + "\n".join(
                f"  - {e}" for e in errors
            )
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> StrategyConfig:
        """Build a config from the classic camel-case option names.

        Unknown options are ignored. Options left as None take the default.

        Raises:
            ConfigurationError: If openAmBaseUrl or callbackUrl is absent.
        """
        options = options or {}
        kwargs: dict[str, Any] = {
            field: options[key]
            for key, field in _OPTION_NAMES.items()
            if options.get(key) is not None
        }
        kwargs.setdefault("base_url", "")
        kwargs.setdefault("callback_url", "")
        return cls(**kwargs)

    @classmethod
    def from_settings(cls, settings: Settings) -> StrategyConfig:
        """Build a config from the application Settings."""
        openam = settings.openam
        return cls(
            base_url=openam.base_url,
            callback_url=openam.callback_url,
            realm=openam.realm,
            cookie_name=openam.cookie_name,
            skip_user_profile=openam.skip_user_profile,
            login_page=openam.login_page,
            timeout=openam.timeout_seconds,
        )


def _accepts_token(func: Callable[..., Any]) -> bool:
    """Return True if ``func`` can be called with one positional argument."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return True
    try:
        signature.bind("token")
    except TypeError:
        return False
    return True


def resolve_skip_predicate(skip: SkipUserProfile) -> SkipPredicate:
    """Turn the skip_user_profile option into a uniform async predicate.

    Called once when the strategy is constructed, so no request ever
    branches on the option's shape.
    """
    if isinstance(skip, bool):
        constant = skip

        async def skip_constant(token: str) -> bool:  # noqa: ARG001
            return constant

        return skip_constant

    func = skip
    pass_token = _accepts_token(func)

    async def skip_callable(token: str) -> bool:
        result = func(token) if pass_token else func()  # type: ignore[call-arg]
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    return skip_callable
