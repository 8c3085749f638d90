"""Starlette integration: turn strategy outcomes into HTTP responses.

Usage::

    @app.route("/auth/openam/callback")
    async def callback(request):
        response = await authenticate_request(strategy, request)
        if response is not None:
            return response
        return RedirectResponse("/account")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from starlette.responses import PlainTextResponse, RedirectResponse, Response

if TYPE_CHECKING:
    from starlette.requests import Request

    from openam_auth.auth.strategy import OpenAmStrategy

logger = logging.getLogger(__name__)


class StarletteOutcomeHandler:
    """OutcomeHandler that records the outcome for one Starlette request.

    On success the user and info are stored on ``request.state`` and no
    response is produced, so the route carries on. Errors are kept and
    re-raised by raise_for_error() for the host's exception handling.
    """

    def __init__(
        self, request: Request, *, failure_redirect: str | None = None
    ) -> None:
        self.request = request
        self.failure_redirect = failure_redirect
        self.response: Response | None = None
        self.cause: BaseException | None = None
        self._signaled = False

    def _mark(self) -> None:
        if self._signaled:
            msg = "authentication outcome already signaled"
            raise RuntimeError(msg)
        self._signaled = True

    def redirect(self, location: str) -> None:
        self._mark()
        self.response = RedirectResponse(location, status_code=302)

    def success(self, user: Any, info: Any = None) -> None:
        self._mark()
        self.request.state.user = user
        self.request.state.auth_info = info

    def fail(self, info: Any = None) -> None:
        self._mark()
        logger.info("Authentication failed: %s", info)
        if self.failure_redirect:
            self.response = RedirectResponse(self.failure_redirect, status_code=302)
        else:
            self.response = PlainTextResponse("Unauthorized", status_code=401)

    def error(self, cause: BaseException) -> None:
        self._mark()
        self.cause = cause

    def raise_for_error(self) -> None:
        if self.cause is not None:
            raise self.cause


async def authenticate_request(
    strategy: OpenAmStrategy,
    request: Request,
    *,
    callback_url: str | None = None,
    failure_redirect: str | None = None,
) -> Response | None:
    """Authenticate a Starlette request.

    Returns:
        A response to send (login redirect or failure), or None when the
        user was authenticated and is available as ``request.state.user``.

    Raises:
        Exception: The cause of an error outcome, unchanged, so the host
            framework turns it into a 5xx response.
    """
    handler = StarletteOutcomeHandler(request, failure_redirect=failure_redirect)
    await strategy.authenticate(request, handler, callback_url=callback_url)
    handler.raise_for_error()
    return handler.response
