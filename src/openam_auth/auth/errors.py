"""Exception types raised by the OpenAM authentication layer.

Protocol-level rejections (provider error, invalid token, verify rejecting
the user) are not exceptions: they become redirects or fail outcomes.
Everything here is either fatal at startup or surfaced through the
strategy's error channel.
"""

from __future__ import annotations


class OpenAmAuthError(Exception):
    """Base class for all openam_auth errors."""


class ConfigurationError(OpenAmAuthError, ValueError):
    """Required strategy configuration is missing or inconsistent."""


class OpenAmTransportError(OpenAmAuthError):
    """The identity provider could not be reached or answered badly.

    Attributes:
        cause: The underlying exception, if any. Also chained as __cause__
            when raised with ``raise ... from``.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ProfileMappingError(OpenAmAuthError):
    """Provider attributes could not be mapped onto a Profile."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
