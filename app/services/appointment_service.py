"""Appointment service for business logic."""

from datetime import date

import structlog
from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.timezones import day_bounds_utc, local_to_utc, now_in_time_zone
from app.database import acquire
from app.models.appointments import appointments
from app.models.clinic_locations import clinic_locations
from app.schemas.appointments import AppointmentCreate, AppointmentStatus, AppointmentUpdate
from app.services.results import StoreResult

logger = structlog.get_logger()


class AppointmentService:
    """
    Service for managing appointments.

    Every operation runs exactly one statement. Failures never propagate:
    they are logged and returned as a failed ``StoreResult``. Time zone
    names are expected to be validated by the caller.
    """

    def __init__(self, engine: AsyncEngine):
        """Initialize service with the pooled engine."""
        self.engine = engine

    async def list_by_date_and_location(
        self,
        local_date: date,
        time_zone: str,
        location_id: int | None = None,
    ) -> StoreResult:
        """
        List appointments on a local calendar day, earliest first.

        Args:
            local_date: Calendar day as seen in ``time_zone``
            time_zone: IANA zone name used to compute the day's UTC bounds
            location_id: Restrict to one clinic location, or all when None

        Returns:
            Result whose data is a list of appointment rows with ``clinic_name``
        """
        start, end = day_bounds_utc(local_date, time_zone)

        conditions = [
            appointments.c.appointment_date_time >= start,
            appointments.c.appointment_date_time <= end,
        ]
        if location_id is not None:
            conditions.append(appointments.c.clinic_location == location_id)

        query = (
            select(appointments, clinic_locations.c.name.label("clinic_name"))
            .select_from(
                appointments.outerjoin(
                    clinic_locations,
                    appointments.c.clinic_location == clinic_locations.c.id,
                )
            )
            .where(and_(*conditions))
            .order_by(appointments.c.appointment_date_time.asc(), appointments.c.id.asc())
        )

        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(query)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error(
                "appointment_list_failed",
                date=local_date.isoformat(),
                location_id=location_id,
                error=str(e),
            )
            return StoreResult.database_error()

        return StoreResult.ok([dict(row) for row in rows])

    async def create(self, data: AppointmentCreate) -> StoreResult:
        """
        Book a new appointment.

        The booking time is wall-clock time in ``data.time_zone`` and is
        stored as UTC. New appointments always start as scheduled.
        """
        values = {
            "appointment_date_time": local_to_utc(data.appointment_date_time, data.time_zone),
            "status": AppointmentStatus.SCHEDULED.value,
            "patient_name": data.patient_name,
            "patient_phone_number": data.phone,
            "clinic_location": data.clinic_location,
            "diagnosis": "",
            "notes": data.notes,
            "updated_at": now_in_time_zone(data.time_zone),
            "updated_by": data.updated_by,
        }

        stmt = insert(appointments).values(**values).returning(appointments.c.id)
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(stmt)
                appointment_id = result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("appointment_create_failed", error=str(e))
            return StoreResult.database_error()

        logger.info("appointment_created", appointment_id=appointment_id)
        return StoreResult.ok({"id": appointment_id})

    async def update(self, data: AppointmentUpdate) -> StoreResult:
        """
        Overwrite every editable column of an appointment.

        There is no version check: the last write wins.
        """
        values = {
            "patient_name": data.patient_name,
            "patient_phone_number": data.phone,
            "status": data.status.value,
            "diagnosis": data.diagnosis,
            "notes": data.notes,
            "amount": data.amount,
            "clinic_location": data.clinic_location,
            "updated_at": now_in_time_zone(data.time_zone),
            "updated_by": data.updated_by,
        }

        stmt = (
            update(appointments)
            .where(appointments.c.id == data.id)
            .values(**values)
            .returning(appointments.c.id)
        )
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(stmt)
                appointment_id = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("appointment_update_failed", appointment_id=data.id, error=str(e))
            return StoreResult.database_error()

        if appointment_id is None:
            return StoreResult.not_found("Appointment not found")
        return StoreResult.ok({"id": appointment_id})

    async def delete(self, appointment_id: int) -> StoreResult:
        """Permanently delete an appointment."""
        stmt = delete(appointments).where(appointments.c.id == appointment_id).returning(
            appointments.c.id
        )
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(stmt)
                deleted_id = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("appointment_delete_failed", appointment_id=appointment_id, error=str(e))
            return StoreResult.database_error()

        if deleted_id is None:
            return StoreResult.not_found("Appointment not found")

        logger.info("appointment_deleted", appointment_id=appointment_id)
        return StoreResult.ok({"id": deleted_id})

