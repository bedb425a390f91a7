"""Appointment schemas for request/response validation."""

import re
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.timezones import as_utc, find_time_zone

# Ten digits, leading 6-9 (Indian mobile numbers)
PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _validate_time_zone(value: str) -> str:
    if find_time_zone(value) is None:
        raise ValueError(f"Invalid time zone: {value}")
    return value


def _validate_phone(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not PHONE_PATTERN.match(value):
        raise ValueError("Invalid phone number")
    return value


class AppointmentCreate(BaseModel):
    """Booking form payload."""

    model_config = ConfigDict(populate_by_name=True)

    appointment_date_time: datetime = Field(..., alias="datetime")
    patient_name: str = Field(..., alias="name", max_length=100)
    clinic_location: int = Field(..., alias="clinicLocation")
    phone: str | None = None
    notes: str = ""
    updated_by: str = Field(..., min_length=1)
    time_zone: str = Field(..., alias="timeZone", min_length=1)

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        """Time zone must be a known IANA name."""
        return _validate_time_zone(v)

    @field_validator("patient_name")
    @classmethod
    def validate_patient_name(cls, v: str) -> str:
        """Patient name must not be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Patient name is required")
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> Any:
        """Treat blank as absent, otherwise require a valid mobile number."""
        return _validate_phone(_blank_to_none(v))

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, v: Any) -> Any:
        return "" if v is None else v


class AppointmentUpdate(BaseModel):
    """
    Management dialog payload.

    Every column is overwritten on update, so blank or missing optional
    fields collapse to their defaults rather than keeping stored values.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    patient_name: str = Field(..., alias="patientName", max_length=100)
    phone: str | None = Field(None, alias="phoneNumber")
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    diagnosis: str = ""
    notes: str = ""
    amount: Decimal = Field(default=Decimal("0"), ge=0)
    updated_by: str = Field(..., min_length=1)
    clinic_location: int = Field(..., alias="clinic_id")
    time_zone: str = Field(..., alias="timeZone", min_length=1)

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, v: str) -> str:
        """Time zone must be a known IANA name."""
        return _validate_time_zone(v)

    @field_validator("patient_name")
    @classmethod
    def validate_patient_name(cls, v: str) -> str:
        """Patient name must not be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Patient name is required")
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> Any:
        """Treat blank as absent, otherwise require a valid mobile number."""
        return _validate_phone(_blank_to_none(v))

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return AppointmentStatus.SCHEDULED if v is None else v

    @field_validator("diagnosis", "notes", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def default_amount(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return Decimal("0") if v is None else v


class PersistAppointmentRequest(BaseModel):
    """Request body for persist-appointment."""

    payload: AppointmentCreate


class UpdateAppointmentRequest(BaseModel):
    """Request body for update-appointment."""

    payload: AppointmentUpdate


class AppointmentResponse(BaseModel):
    """Schema for appointment response."""

    id: int
    appointment_date_time: datetime
    status: AppointmentStatus
    patient_name: str
    patient_phone_number: str | None = None
    clinic_location: int
    clinic_name: str | None = None
    diagnosis: str
    notes: str
    amount: float
    updated_at: datetime
    updated_by: str | None = None

    model_config = {"from_attributes": True}

    @field_validator("appointment_date_time", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Report instants in UTC."""
        return as_utc(v)


class AppointmentListResponse(BaseModel):
    """Appointments for one day."""

    success: bool = True
    data: list[AppointmentResponse]


class AppointmentIdData(BaseModel):
    id: int


class UpdateAppointmentResponse(BaseModel):
    """Successful update."""

    success: bool = True
    data: AppointmentIdData
