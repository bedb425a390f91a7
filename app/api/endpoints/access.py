"""Login gate endpoint."""

import structlog
from fastapi import APIRouter, status

from app.core.exceptions import AppException, InternalServerErrorException
from app.dependencies import AccessControl
from app.schemas.users import CheckAccessRequest, CheckAccessResponse

logger = structlog.get_logger()

router = APIRouter()


@router.post(
    "/check-access",
    response_model=CheckAccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Check whether an email may sign in",
)
async def check_access(
    data: CheckAccessRequest,
    service: AccessControl,
) -> CheckAccessResponse:
    """
    Check an email against the allow-list.

    Args:
        data: Email to check
        service: Access control service

    Returns:
        ``{"isAllowed": bool}``
    """
    try:
        is_allowed = await service.user_exists(data.email)
    except AppException:
        raise
    except Exception as e:
        logger.error("check_access_failed", error=str(e))
        raise InternalServerErrorException() from e

    return CheckAccessResponse(is_allowed=is_allowed)
