"""Clinic location directory."""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.exceptions import DatabaseException
from app.database import acquire
from app.models.clinic_locations import clinic_locations

logger = structlog.get_logger()


class ClinicLocationService:
    """Read-only lookup of clinic locations. Not cached; queried per request."""

    def __init__(self, engine: AsyncEngine):
        """Initialize service with the pooled engine."""
        self.engine = engine

    async def list_locations(self) -> list[dict]:
        """Get all locations ordered by id."""
        query = select(clinic_locations.c.id, clinic_locations.c.name).order_by(
            clinic_locations.c.id
        )
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(query)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error("clinic_location_list_failed", error=str(e))
            raise DatabaseException() from e

        return [dict(row) for row in rows]
