"""Helpers for reading the parts of a request the handshake depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlsplit, urlunsplit

if TYPE_CHECKING:
    from openam_auth.auth.protocol import AuthRequest


def parse_cookie_header(header: str | None) -> dict[str, str]:
    """Parse a ``Cookie`` header into a name -> value mapping.

    Pairs are separated by semicolons. Names and values are stripped; a
    pair without ``=`` yields an empty value. Values may themselves contain
    ``=``. Later duplicates override earlier ones.

    Args:
        header: The raw header value, or None when the request has none.

    Returns:
        Mapping of cookie name to value.
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for pair in header.split(";"):
        name, _, value = pair.partition("=")
        name = name.strip()
        if not name:
            continue
        cookies[name] = value.strip()
    return cookies


def original_url(request: AuthRequest) -> str:
    """Reconstruct the URL the client originally requested.

    Uses ``X-Forwarded-Proto`` and ``Host`` when a proxy set them. The query
    string is dropped: only scheme, host and path are kept.
    """
    headers = request.headers
    scheme = headers.get("x-forwarded-proto", "").split(",")[0].strip()
    host = headers.get("host", "").strip()
    return urlunsplit(
        (
            scheme or request.url.scheme,
            host or request.url.netloc,
            request.url.path,
            "",
            "",
        )
    )


def resolve_callback_url(request: AuthRequest, callback_url: str) -> str:
    """Qualify a relative callback URL against the originating request."""
    if urlsplit(callback_url).scheme:
        return callback_url
    return urljoin(original_url(request), callback_url)
