"""Allowed users table model using SQLAlchemy Core."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    Table,
    Text,
    func,
    text,
)

from app.models.base import metadata

# Allow-list of emails permitted to sign in
allowed_users = Table(
    "allowed_users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    # Matched exactly, case-sensitive as stored
    Column("email", Text, nullable=False, unique=True),
    Column("name", Text, nullable=True),
    Column("notes", Text, nullable=True),
    Column("is_admin", Boolean, nullable=False, server_default=text("false")),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
