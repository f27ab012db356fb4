"""
Edge authentication guard and security headers.

Requests under a protected path prefix without a session cookie are
redirected to the login page, keeping the original path in a `redirect`
query parameter. Only cookie presence is checked here; token verification
happens in opsdesk.auth.dependencies for API routes.

Every response (redirects included) carries the static security headers.
"""

import logging
from typing import Dict, Iterable, Tuple
from urllib.parse import quote, urlencode

from fastapi import Request, Response, status
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from opsdesk.utils.logging import get_logger, log_event

logger = get_logger(__name__)

DEFAULT_PROTECTED_PREFIXES = ("/admin", "/client", "/dashboard")
DEFAULT_COOKIE_NAME = "auth-token"
DEFAULT_LOGIN_PATH = "/login"
DEFAULT_CONNECT_SRC = "http://localhost:3001"


def build_security_headers(connect_src: str = DEFAULT_CONNECT_SRC) -> Dict[str, str]:
    """Static security headers attached to every response."""
    connect_sources = " ".join(source for source in ("'self'", connect_src) if source)
    return {
        "Content-Security-Policy": (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-eval' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: https:; "
            "font-src 'self' data:; "
            f"connect-src {connect_sources};"
        ),
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "X-XSS-Protection": "1; mode=block",
    }


def _normalize_prefixes(prefixes: Iterable[str]) -> Tuple[str, ...]:
    normalized = []
    for prefix in prefixes:
        prefix = prefix.strip().rstrip("/")
        if not prefix:
            continue
        normalized.append(prefix if prefix.startswith("/") else f"/{prefix}")
    return tuple(normalized)


class EdgeAuthMiddleware(BaseHTTPMiddleware):
    """
    Cookie-presence route guard plus security headers.

    Args:
        app: Wrapped ASGI application
        protected_prefixes: Path prefixes requiring a session cookie. A path
            matches a prefix when it equals it or continues with "/".
        cookie_name: Session cookie checked for presence
        login_path: Redirect target for unauthenticated requests
        connect_src: Extra origin allowed by the CSP connect-src directive
    """

    def __init__(
        self,
        app: ASGIApp,
        protected_prefixes: Iterable[str] = DEFAULT_PROTECTED_PREFIXES,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        login_path: str = DEFAULT_LOGIN_PATH,
        connect_src: str = DEFAULT_CONNECT_SRC,
    ) -> None:
        super().__init__(app)
        self.protected_prefixes = _normalize_prefixes(protected_prefixes)
        self.cookie_name = cookie_name
        self.login_path = login_path
        self.security_headers = build_security_headers(connect_src)

    def is_protected(self, path: str) -> bool:
        return any(
            path == prefix or path.startswith(f"{prefix}/")
            for prefix in self.protected_prefixes
        )

    def login_redirect_url(self, path: str) -> str:
        return f"{self.login_path}?{urlencode({'redirect': path}, quote_via=quote)}"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        if self.is_protected(path) and not request.cookies.get(self.cookie_name):
            log_event(
                logger,
                logging.INFO,
                f"Redirecting unauthenticated request for {path} to {self.login_path}",
                request_id=getattr(request.state, "request_id", None),
            )
            response: Response = RedirectResponse(
                self.login_redirect_url(path),
                status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            )
        else:
            response = await call_next(request)

        for name, value in self.security_headers.items():
            response.headers[name] = value

        return response
