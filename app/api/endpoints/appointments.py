"""Appointment endpoints."""

from datetime import date

import structlog
from fastapi import APIRouter, Query, status

from app.core.exceptions import (
    AppException,
    InternalServerErrorException,
    NotFoundException,
)
from app.core.timezones import resolve_time_zone
from app.dependencies import Appointments
from app.schemas.appointments import (
    AppointmentListResponse,
    AppointmentResponse,
    PersistAppointmentRequest,
    UpdateAppointmentRequest,
    UpdateAppointmentResponse,
)
from app.schemas.common import SuccessResponse
from app.services.results import ErrorKind, StoreResult

logger = structlog.get_logger()

router = APIRouter()


def raise_for_failure(result: StoreResult) -> None:
    """Map a failed store result onto an HTTP error."""
    if result.success:
        return
    if result.kind == ErrorKind.NOT_FOUND:
        raise NotFoundException(result.error or "Not found")
    raise InternalServerErrorException()


@router.get(
    "/get-appointments",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List appointments for a day",
)
async def get_appointments(
    service: Appointments,
    day: date = Query(..., alias="date", description="Calendar day, YYYY-MM-DD"),
    time_zone: str = Query("UTC", alias="timeZone", description="IANA time zone of the day"),
    location: int | None = Query(None, description="Clinic location id; all when omitted"),
) -> AppointmentListResponse:
    """
    List appointments falling on a local calendar day.

    Args:
        service: Appointment service
        day: Day to list, interpreted in ``timeZone``
        time_zone: IANA zone name
        location: Optional clinic location filter

    Returns:
        Appointments ordered by time, with clinic names
    """
    resolve_time_zone(time_zone)

    try:
        result = await service.list_by_date_and_location(day, time_zone, location)
    except AppException:
        raise
    except Exception as e:
        logger.error("get_appointments_failed", error=str(e))
        raise InternalServerErrorException() from e

    raise_for_failure(result)
    return AppointmentListResponse(
        data=[AppointmentResponse.model_validate(row) for row in result.data]
    )


@router.post(
    "/persist-appointment",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Book an appointment",
)
async def persist_appointment(
    request: PersistAppointmentRequest,
    service: Appointments,
) -> SuccessResponse:
    """Book an appointment from the booking form."""
    try:
        result = await service.create(request.payload)
    except AppException:
        raise
    except Exception as e:
        logger.error("persist_appointment_failed", error=str(e))
        raise InternalServerErrorException() from e

    raise_for_failure(result)
    return SuccessResponse()


@router.put(
    "/update-appointment",
    response_model=UpdateAppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Update an appointment",
)
async def update_appointment(
    request: UpdateAppointmentRequest,
    service: Appointments,
) -> UpdateAppointmentResponse:
    """
    Overwrite an appointment from the management dialog.

    Returns:
        ``{"success": true, "data": {"id": ...}}``; 404 when the id is unknown
    """
    try:
        result = await service.update(request.payload)
    except AppException:
        raise
    except Exception as e:
        logger.error("update_appointment_failed", error=str(e))
        raise InternalServerErrorException() from e

    raise_for_failure(result)
    return UpdateAppointmentResponse(data=result.data)


@router.delete(
    "/delete-appointment",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete an appointment",
)
async def delete_appointment(
    service: Appointments,
    id: int = Query(..., description="Appointment id"),
) -> SuccessResponse:
    """Permanently delete an appointment; 404 when the id is unknown."""
    try:
        result = await service.delete(id)
    except AppException:
        raise
    except Exception as e:
        logger.error("delete_appointment_failed", appointment_id=id, error=str(e))
        raise InternalServerErrorException() from e

    raise_for_failure(result)
    return SuccessResponse()
