"""OpenAM authentication strategy.

Provides cookie-token single sign-on against an OpenAM server:
- Login redirect with a ``goto`` callback
- Session token validation and attribute retrieval
- Profile normalization and application-level verification
- Mock client for testing

Usage:
    from openam_auth.auth import OpenAmStrategy, StrategyConfig

    strategy = OpenAmStrategy(
        StrategyConfig(
            base_url="https://sso.example.com/openam/",
            callback_url="/auth/openam/callback",
        ),
        verify,
    )
    outcome = await strategy.authenticate(request)
"""

from __future__ import annotations

from openam_auth.auth.config import StrategyConfig, resolve_skip_predicate
from openam_auth.auth.errors import (
    ConfigurationError,
    OpenAmAuthError,
    OpenAmTransportError,
    ProfileMappingError,
)
from openam_auth.auth.factory import (
    clear_config_cache,
    create_strategy,
    get_openam_client,
)
from openam_auth.auth.models import (
    AuthOutcome,
    ErrorOutcome,
    FailOutcome,
    Profile,
    ProfileName,
    RedirectOutcome,
    SessionResult,
    SuccessOutcome,
)
from openam_auth.auth.profile import normalize_profile
from openam_auth.auth.protocol import (
    AuthRequest,
    OpenAmClientProtocol,
    OutcomeHandler,
)
from openam_auth.auth.request import parse_cookie_header
from openam_auth.auth.strategy import OpenAmStrategy, dispatch

__all__ = [
    "AuthOutcome",
    "AuthRequest",
    "ConfigurationError",
    "ErrorOutcome",
    "FailOutcome",
    "OpenAmAuthError",
    "OpenAmClientProtocol",
    "OpenAmStrategy",
    "OpenAmTransportError",
    "OutcomeHandler",
    "Profile",
    "ProfileMappingError",
    "ProfileName",
    "RedirectOutcome",
    "SessionResult",
    "StrategyConfig",
    "SuccessOutcome",
    "clear_config_cache",
    "create_strategy",
    "dispatch",
    "get_openam_client",
    "normalize_profile",
    "parse_cookie_header",
    "resolve_skip_predicate",
]
