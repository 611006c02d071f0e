"""Fixed security headers added to every response."""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from viron.core.constants import DEFAULT_HSTS_MAX_AGE

BASE_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def build_security_headers(
    hsts_max_age: int | None, *, hsts_preload: bool = False
) -> dict[str, str]:
    """Headers to send, with HSTS only when ``hsts_max_age`` is set.

    Args:
        hsts_max_age: HSTS max age in seconds; None or 0 disables HSTS.
        hsts_preload: Whether to ask for inclusion in browser preload lists.

    Returns:
        dict[str, str]: Header names and values.
    """
    headers = dict(BASE_SECURITY_HEADERS)
    if hsts_max_age:
        hsts = f"max-age={hsts_max_age}; includeSubDomains"
        if hsts_preload:
            hsts += "; preload"
        headers["Strict-Transport-Security"] = hsts
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Apply ``build_security_headers`` to every response."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        hsts_max_age: int | None = DEFAULT_HSTS_MAX_AGE,
        hsts_preload: bool = False,
    ) -> None:
        super().__init__(app)
        self.headers = build_security_headers(hsts_max_age, hsts_preload=hsts_preload)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Add the headers once the rest of the stack has responded."""
        response = await call_next(request)
        response.headers.update(self.headers)
        return response
