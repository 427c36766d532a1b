import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from magus.core.config import Settings
from magus.core.exceptions import InvalidSessionError
from magus.services.auth_service import read_session_claims

logger = logging.getLogger(__name__)


class PageGuardMiddleware(BaseHTTPMiddleware):
    """
    Redirects browser page requests according to the session cookie.

    Only page routes are handled here; API routes check the session
    themselves and answer 401 instead of redirecting.
    """

    PUBLIC_PAGES = {"/login", "/users"}
    PROTECTED_PREFIXES = ("/chat",)

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    def _is_authenticated(self, request: Request) -> bool:
        token = request.cookies.get(self.settings.SESSION_COOKIE_NAME)
        if not token:
            return False
        try:
            read_session_claims(token, self.settings.AUTH_SECRET.get_secret_value())
        except InvalidSessionError:
            return False
        return True

    def _is_protected(self, path: str) -> bool:
        if path == "/users" and self.settings.USERS_REQUIRE_SESSION:
            return True
        if path in self.PUBLIC_PAGES:
            return False
        return any(path == p or path.startswith(p + "/") for p in self.PROTECTED_PREFIXES)

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if path == "/":
            target = "/chat" if self._is_authenticated(request) else "/login"
            return RedirectResponse(url=target)

        if self._is_protected(path) and not self._is_authenticated(request):
            logger.debug("Redirecting unauthenticated request for %s to /login", path)
            return RedirectResponse(url="/login")

        return await call_next(request)
