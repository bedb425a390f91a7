"""Uniform result type for appointment operations."""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class ErrorKind(str, Enum):
    """Why an operation failed."""

    NOT_FOUND = "not_found"
    DATABASE = "database"


class StoreResult(BaseModel):
    """
    Outcome of a single store operation.

    Failures are reported here instead of raised, so callers never see a
    database exception. ``kind`` tells not-found apart from a database error;
    ``error`` is the message shown to clients.
    """

    success: bool
    data: Any = None
    error: str | None = None
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, data: Any = None) -> "StoreResult":
        return cls(success=True, data=data)

    @classmethod
    def not_found(cls, message: str) -> "StoreResult":
        return cls(success=False, error=message, kind=ErrorKind.NOT_FOUND)

    @classmethod
    def database_error(cls, message: str = "Database error") -> "StoreResult":
        return cls(success=False, error=message, kind=ErrorKind.DATABASE)
