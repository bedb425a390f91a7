"""Appointment table model using SQLAlchemy Core."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    func,
    text,
)

from app.models.base import metadata

appointments = Table(
    "appointment",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # Always stored as UTC
    Column("appointment_date_time", DateTime(timezone=True), nullable=False),
    Column("status", Text, nullable=False, server_default=text("'scheduled'")),
    Column("patient_name", String(100), nullable=False),
    Column("patient_phone_number", String(20), nullable=True),
    Column(
        "clinic_location",
        Integer,
        ForeignKey("clinic_locations.id"),
        nullable=False,
    ),
    Column("diagnosis", Text, nullable=False, server_default=text("''")),
    Column("notes", Text, nullable=False, server_default=text("''")),
    Column("amount", Numeric(10, 2), nullable=False, server_default=text("0")),
    # Audit fields; updated_by is a display name, not a user reference
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_by", Text, nullable=True),
    CheckConstraint(
        "status IN ('scheduled', 'completed', 'cancelled')",
        name="appointment_status_check",
    ),
)

Index("idx_appointment_date_time", appointments.c.appointment_date_time)
Index("idx_appointment_clinic_location", appointments.c.clinic_location)
