"""Correlation id propagation.

The id comes from the ``X-Correlation-ID`` request header or is generated.
It is current for the rest of the request, bound to every loguru record
emitted meanwhile and echoed back on the response.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from viron.api.constants import CORRELATION_ID_HEADER
from viron.core.context import correlation_scope, new_correlation_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Run each request inside its own correlation scope."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Handle the request with its correlation id in context.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with the correlation id header.
        """
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER) or new_correlation_id()
        )

        with (
            correlation_scope(correlation_id),
            logger.contextualize(correlation_id=correlation_id),
        ):
            response = await call_next(request)

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
