"""Error handling middleware."""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppException

logger = structlog.get_logger()

INTERNAL_SERVER_ERROR = "Internal server error"

HTTP_ERROR_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the ``{success: false, error}`` body used by every error."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def describe_validation_error(exc: RequestValidationError) -> str:
    """
    Turn the first validation error into a short message.

    Missing fields read ``"<field> is required"``; anything else is
    ``"<field>: <reason>"``.
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    fields = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
    reason = error.get("ctx", {}).get("error") or error.get("msg", "invalid value")

    if not fields:
        return "Request body is required" if error.get("type") == "missing" else str(reason)
    if error.get("type") == "missing":
        return f"{fields[-1]} is required"
    return f"{fields[-1]}: {reason}"


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle custom application exceptions.

    Server-side failures are logged and reported with a generic message.
    """
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "request_error",
            path=request.url.path,
            error_type=exc.__class__.__name__,
            error=exc.message,
        )
        return error_response(exc.status_code, INTERNAL_SERVER_ERROR)

    return error_response(exc.status_code, exc.message)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Handle HTTP exceptions raised by routing (unknown path, wrong method)."""
    message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
    response = error_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report missing or malformed request fields as 400."""
    return error_response(status.HTTP_400_BAD_REQUEST, describe_validation_error(exc))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error("unhandled_exception", path=request.url.path, error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_SERVER_ERROR)
