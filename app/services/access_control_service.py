"""Allow-list service backing login gating and user management."""

import structlog
from sqlalchemy import delete, exists, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from app.core.exceptions import DatabaseException
from app.database import acquire
from app.models.allowed_users import allowed_users

logger = structlog.get_logger()


class AccessControlService:
    """
    Service for the email allow-list.

    Lookups that find nothing return ``None`` (or ``False``); any driver or
    query failure is logged and raised as ``DatabaseException``.
    """

    def __init__(self, engine: AsyncEngine):
        """Initialize service with the pooled engine."""
        self.engine = engine

    @staticmethod
    def _insert_ignoring_duplicates(conn: AsyncConnection, **values):
        """INSERT ... ON CONFLICT (email) DO NOTHING RETURNING *."""
        insert = sqlite_insert if conn.dialect.name == "sqlite" else pg_insert
        return (
            insert(allowed_users)
            .values(**values)
            .on_conflict_do_nothing(index_elements=[allowed_users.c.email])
            .returning(allowed_users)
        )

    async def user_exists(self, email: str) -> bool:
        """Check whether an email is on the allow-list (exact match)."""
        query = select(exists().where(allowed_users.c.email == email))
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(query)
                return bool(result.scalar())
        except SQLAlchemyError as e:
            logger.error("allowed_user_lookup_failed", error=str(e))
            raise DatabaseException() from e

    async def get_user_by_email(self, email: str) -> dict | None:
        """Get allow-list entry by email."""
        query = select(allowed_users).where(allowed_users.c.email == email)
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(query)
                user = result.mappings().first()
        except SQLAlchemyError as e:
            logger.error("allowed_user_lookup_failed", error=str(e))
            raise DatabaseException() from e

        return dict(user) if user else None

    async def list_users(self) -> list[dict]:
        """List allow-list entries, newest first."""
        query = select(allowed_users).order_by(
            allowed_users.c.created_at.desc(),
            allowed_users.c.id.desc(),
        )
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(query)
                rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error("allowed_user_list_failed", error=str(e))
            raise DatabaseException() from e

        return [dict(row) for row in rows]

    async def add_user(
        self,
        email: str,
        is_admin: bool = False,
        name: str | None = None,
        notes: str | None = None,
    ) -> dict | None:
        """
        Add an email to the allow-list.

        Returns:
            The created entry, or None when the email is already listed
        """
        try:
            async with acquire(self.engine) as conn:
                query = self._insert_ignoring_duplicates(
                    conn, email=email, is_admin=is_admin, name=name, notes=notes
                )
                result = await conn.execute(query)
                user = result.mappings().first()
        except SQLAlchemyError as e:
            logger.error("allowed_user_insert_failed", error=str(e))
            raise DatabaseException() from e

        if not user:
            logger.info("allowed_user_already_exists", email=email)
            return None
        return dict(user)

    async def update_user(self, user_id: int, email: str, is_admin: bool) -> dict | None:
        """Change the email and admin flag of an entry; None if it does not exist."""
        query = (
            update(allowed_users)
            .where(allowed_users.c.id == user_id)
            .values(email=email, is_admin=is_admin)
            .returning(allowed_users)
        )
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(query)
                user = result.mappings().first()
        except SQLAlchemyError as e:
            logger.error("allowed_user_update_failed", user_id=user_id, error=str(e))
            raise DatabaseException() from e

        return dict(user) if user else None

    async def delete_user(self, user_id: int) -> dict | None:
        """Remove an entry; returns the deleted row or None if it does not exist."""
        query = delete(allowed_users).where(allowed_users.c.id == user_id).returning(allowed_users)
        try:
            async with acquire(self.engine) as conn:
                result = await conn.execute(query)
                user = result.mappings().first()
        except SQLAlchemyError as e:
            logger.error("allowed_user_delete_failed", user_id=user_id, error=str(e))
            raise DatabaseException() from e

        return dict(user) if user else None
