"""OpenAM client and strategy factory.

Provides factory functions to get the appropriate client based on
configuration (real OpenAM or mock for testing) and to wire a strategy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from openam_auth.auth.config import StrategyConfig
from openam_auth.config import get_settings

if TYPE_CHECKING:
    from openam_auth.auth.protocol import OpenAmClientProtocol, VerifyFunction
    from openam_auth.auth.strategy import OpenAmStrategy
    from openam_auth.config import Settings


# Cached mock client instance to preserve session state across requests
_mock_client_instance: OpenAmClientProtocol | None = None


def get_openam_client(
    config: StrategyConfig, settings: Settings | None = None
) -> OpenAmClientProtocol:
    """Get the appropriate OpenAM client based on configuration.

    If DEV__AUTH_MOCK=true in ``settings`` (defaults to get_settings()),
    returns MockOpenAmClient (singleton to preserve sessions). Otherwise,
    returns OpenAmClient for ``config``.
    """
    global _mock_client_instance  # noqa: PLW0603

    if (settings or get_settings()).dev.auth_mock:
        if _mock_client_instance is None:
            from openam_auth.auth.mock import MockOpenAmClient

            _mock_client_instance = MockOpenAmClient(
                base_url=config.base_url, realm=config.realm
            )
        return _mock_client_instance

    from openam_auth.auth.client import OpenAmClient

    return OpenAmClient(
        config.base_url,
        config.realm,
        config.cookie_name,
        timeout=config.timeout,
    )


def create_strategy(
    verify: VerifyFunction, settings: Settings | None = None
) -> OpenAmStrategy:
    """Build a strategy from Settings (defaults to get_settings()).

    Raises:
        ConfigurationError: If OPENAM__BASE_URL or OPENAM__CALLBACK_URL is unset.
    """
    from openam_auth.auth.strategy import OpenAmStrategy

    settings = settings or get_settings()
    config = StrategyConfig.from_settings(settings)
    return OpenAmStrategy(config, verify, client=get_openam_client(config, settings))


def clear_config_cache() -> None:
    """Clear the configuration and mock client caches.

    Useful for testing when you need to reload configuration
    or reset mock client session state.
    """
    global _mock_client_instance  # noqa: PLW0603
    get_settings.cache_clear()
    _mock_client_instance = None
