"""Clinic locations table model using SQLAlchemy Core."""

from sqlalchemy import Column, Integer, Table, Text

from app.models.base import metadata

# Reference data, provisioned out-of-band
clinic_locations = Table(
    "clinic_locations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
)
