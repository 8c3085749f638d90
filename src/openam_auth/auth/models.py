"""Data models for profiles, provider results and authentication outcomes.

These dataclasses are created and discarded within a single request. They
give the real OpenAM client, the mock client and the strategy one shared
vocabulary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# SessionResult.error values
TRANSPORT_ERROR = "transport_error"
INVALID_TOKEN = "invalid_token"


@dataclass(frozen=True)
class SessionResult:
    """Result of asking the provider whether a session token is valid.

    Attributes:
        valid: Whether the token is currently valid.
        error: None for a definitive answer, INVALID_TOKEN when the provider
            rejected the token outright, TRANSPORT_ERROR when it could not
            be asked at all.
        detail: Human-readable detail for logs.
    """

    valid: bool
    error: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class ProfileName:
    """Structured name of a user."""

    family_name: str | None = None
    given_name: str | None = None


@dataclass(frozen=True)
class Profile:
    """Normalized identity record derived from provider attributes.

    Attributes:
        id: The provider token id (``tokenid``).
        username: Login name (``uid``).
        display_name: Common name (``cn``).
        name: Family and given names (``sn`` and ``givenname``).
        email: Primary mail address (``mail``).
        raw_attributes: The complete attribute mapping as returned by the
            provider, for application-specific needs.
    """

    id: str | None
    username: str | None
    display_name: str | None
    name: ProfileName
    email: str | None
    raw_attributes: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RedirectOutcome:
    """The caller should issue an HTTP redirect to ``location``."""

    location: str


@dataclass(frozen=True)
class SuccessOutcome:
    """Authentication succeeded for ``user``."""

    user: Any
    info: Any = None


@dataclass(frozen=True)
class FailOutcome:
    """Authentication was rejected. Not a system fault."""

    info: Any = None


@dataclass(frozen=True)
class ErrorOutcome:
    """An unexpected failure; the host should turn it into a 5xx response."""

    cause: BaseException


type AuthOutcome = RedirectOutcome | SuccessOutcome | FailOutcome | ErrorOutcome
