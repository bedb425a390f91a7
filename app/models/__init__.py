"""Database models."""

from app.models.allowed_users import allowed_users
from app.models.appointments import appointments
from app.models.base import metadata
from app.models.clinic_locations import clinic_locations

__all__ = [
    "allowed_users",
    "appointments",
    "clinic_locations",
    "metadata",
]
