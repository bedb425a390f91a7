"""CORS headers for browser clients."""

from collections.abc import Callable

import structlog
from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware

from app.middleware.error_handler import INTERNAL_SERVER_ERROR, error_response

logger = structlog.get_logger()

ALLOWED_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
ALLOWED_HEADERS = (
    "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
    "Content-MD5, Content-Type, Date, X-Api-Version"
)


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Put credentialed CORS headers on every response.

    Any ``OPTIONS`` request is a preflight: it is answered with 200 and an
    empty body without reaching the router. Unhandled exceptions are turned
    into the generic 500 body here, since the server error handler runs
    outside this middleware and its response would carry no CORS headers.
    """

    def __init__(self, app, allowed_origin: str = "*"):
        super().__init__(app)
        self.headers = {
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Origin": allowed_origin,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "unhandled_exception",
                    path=request.url.path,
                    error_type=e.__class__.__name__,
                    error=str(e),
                )
                response = error_response(
                    status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR
                )

        response.headers.update(self.headers)
        return response
