"""Map OpenAM user attributes onto the canonical Profile."""

from __future__ import annotations

from collections.abc import Mapping

from openam_auth.auth.errors import ProfileMappingError
from openam_auth.auth.models import Profile, ProfileName


def _text(attributes: Mapping[str, str], key: str) -> str | None:
    value = attributes.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"attribute {key!r} is {type(value).__name__}, expected str"
        raise TypeError(msg)
    return value


def normalize_profile(attributes: Mapping[str, str]) -> Profile:
    """Build a Profile from raw provider attributes.

    Mapping: tokenid -> id, uid -> username, cn -> display_name,
    sn -> name.family_name, givenname -> name.given_name, mail -> email.
    Missing attributes become None; the full mapping is kept as
    ``raw_attributes``. Pure, so normalizing the same mapping twice gives
    equal profiles.

    Raises:
        ProfileMappingError: If the attributes are not a mapping of strings.
    """
    try:
        if not isinstance(attributes, Mapping):
            msg = f"expected a mapping, got {type(attributes).__name__}"
            raise TypeError(msg)
        return Profile(
            id=_text(attributes, "tokenid"),
            username=_text(attributes, "uid"),
            display_name=_text(attributes, "cn"),
            name=ProfileName(
                family_name=_text(attributes, "sn"),
                given_name=_text(attributes, "givenname"),
            ),
            email=_text(attributes, "mail"),
            raw_attributes=dict(attributes),
        )
    except Exception as e:
        raise ProfileMappingError(f"failed to map profile: {e}", e) from e
