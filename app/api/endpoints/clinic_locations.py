"""Clinic location endpoints."""

import structlog
from fastapi import APIRouter, status

from app.core.exceptions import AppException, InternalServerErrorException
from app.dependencies import ClinicLocations
from app.schemas.clinic_locations import ClinicLocationListResponse, ClinicLocationResponse

logger = structlog.get_logger()

router = APIRouter()


@router.get(
    "/get-clinic-locations",
    response_model=ClinicLocationListResponse,
    status_code=status.HTTP_200_OK,
    summary="List clinic locations",
)
async def get_clinic_locations(service: ClinicLocations) -> ClinicLocationListResponse:
    """List every clinic location as ``{id, name}`` pairs."""
    try:
        locations = await service.list_locations()
    except AppException:
        raise
    except Exception as e:
        logger.error("get_clinic_locations_failed", error=str(e))
        raise InternalServerErrorException() from e

    return ClinicLocationListResponse(
        data=[ClinicLocationResponse.model_validate(location) for location in locations]
    )
