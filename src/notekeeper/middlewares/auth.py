"""Authentication middleware and dependencies."""
import logging
import re
from typing import Iterable, Optional
from urllib.parse import urlencode

from fastapi import Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from starlette.middleware.base import BaseHTTPMiddleware

from notekeeper.config.settings import settings
from notekeeper.exceptions import Unauthorized
from notekeeper.utils.security import decode_access_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _request_token(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def _token_user_id(token: Optional[str]) -> Optional[str]:
    if not token:
        return None

    payload = decode_access_token(token)
    if payload is None:
        return None

    user_id = payload.get("sub")
    return str(user_id) if user_id else None


def resolve_user_id(request: Request) -> Optional[str]:
    """Owner id carried by the request credentials, or None."""
    return _token_user_id(_request_token(request))


class AccessGateMiddleware(BaseHTTPMiddleware):
    """
    Reject unauthenticated requests before any route runs.

    Interactive page loads are redirected to the sign-in page with the
    original URL as return address; API calls get a 401. Routes matching
    the public allow-list (sign-in/sign-up, shared notes, health) pass.
    """

    def __init__(
        self,
        app,
        public_routes: Optional[Iterable[str]] = None,
        api_prefix: Optional[str] = None,
        sign_in_url: Optional[str] = None,
    ):
        super().__init__(app)
        self.public_patterns = [
            re.compile(pattern)
            for pattern in (settings.PUBLIC_ROUTES if public_routes is None else public_routes)
        ]
        self.api_prefix = api_prefix if api_prefix is not None else settings.API_PREFIX
        self.sign_in_url = sign_in_url or settings.SIGN_IN_URL

    def is_public(self, path: str) -> bool:
        return any(pattern.match(path) for pattern in self.public_patterns)

    def is_interactive(self, request: Request) -> bool:
        if request.method not in ("GET", "HEAD"):
            return False
        if request.url.path.startswith(self.api_prefix + "/") or request.url.path == self.api_prefix:
            return False
        return "text/html" in request.headers.get("accept", "")

    def sign_in_redirect(self, request: Request) -> RedirectResponse:
        query = urlencode({settings.SIGN_IN_REDIRECT_PARAM: str(request.url)})
        return RedirectResponse(f"{self.sign_in_url}?{query}", status_code=307)

    async def dispatch(self, request: Request, call_next):
        user_id = resolve_user_id(request)
        request.state.user_id = user_id

        if user_id or request.method == "OPTIONS" or self.is_public(request.url.path):
            return await call_next(request)

        if self.is_interactive(request):
            logger.info(f"Redirecting unauthenticated navigation to sign-in: {request.url.path}")
            return self.sign_in_redirect(request)

        error = Unauthorized()
        # Same body shape FastAPI gives HTTPExceptions raised in routes
        return JSONResponse(
            status_code=error.status_code,
            content={"detail": error.detail},
            headers=error.headers,
        )


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Get the owner id of the authenticated requester."""
    user_id = getattr(request.state, "user_id", None)
    if not user_id and credentials is not None:
        user_id = _token_user_id(credentials.credentials)
    if not user_id:
        # Session cookie
        user_id = resolve_user_id(request)
    if not user_id:
        raise Unauthorized("Invalid or expired token")
    return user_id
