"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine

from app.database import get_engine
from app.services.access_control_service import AccessControlService
from app.services.appointment_service import AppointmentService
from app.services.clinic_location_service import ClinicLocationService


def get_database_engine() -> AsyncEngine:
    """Dependency for the pooled engine; overridden in tests."""
    return get_engine()


DatabaseEngine = Annotated[AsyncEngine, Depends(get_database_engine)]


def get_access_control_service(engine: DatabaseEngine) -> AccessControlService:
    """Get access control service instance."""
    return AccessControlService(engine)


def get_appointment_service(engine: DatabaseEngine) -> AppointmentService:
    """Get appointment service instance."""
    return AppointmentService(engine)


def get_clinic_location_service(engine: DatabaseEngine) -> ClinicLocationService:
    """Get clinic location service instance."""
    return ClinicLocationService(engine)


# Type aliases for dependency injection
AccessControl = Annotated[AccessControlService, Depends(get_access_control_service)]
Appointments = Annotated[AppointmentService, Depends(get_appointment_service)]
ClinicLocations = Annotated[ClinicLocationService, Depends(get_clinic_location_service)]
