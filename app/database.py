"""Database configuration and connection management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from app.config import settings


def normalize_database_url(url: str) -> str:
    """Point PostgreSQL URLs at the asyncpg driver."""
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://") :]
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def build_connect_args(url: str, require_tls: bool) -> dict[str, Any]:
    """Driver arguments for the given URL."""
    if make_url(url).get_backend_name() != "postgresql":
        return {}

    connect_args: dict[str, Any] = {
        "server_settings": {
            "application_name": settings.app_name,
        },
    }
    if require_tls:
        # Encrypted, certificate not verified
        connect_args["ssl"] = "require"
    return connect_args


@lru_cache
def get_engine() -> AsyncEngine:
    """
    Return the process-wide async engine, creating it on first use.

    The engine owns the connection pool; pool sizing is left at the driver
    defaults.
    """
    url = normalize_database_url(settings.database_url)
    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        connect_args=build_connect_args(url, settings.database_requires_tls),
    )


@asynccontextmanager
async def acquire(engine: AsyncEngine) -> AsyncGenerator[AsyncConnection, None]:
    """
    Check a connection out of the pool for a single statement.

    The statement runs in its own transaction, committed on success and
    rolled back on error. The connection goes back to the pool on every
    exit path.
    """
    async with engine.begin() as conn:
        yield conn


async def dispose_engine() -> None:
    """Close pooled connections if the engine was ever created."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
        get_engine.cache_clear()


async def check_database_connection(engine: AsyncEngine | None = None) -> bool:
    """Check if database connection is healthy."""
    try:
        async with (engine or get_engine()).connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
