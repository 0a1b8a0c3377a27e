"""
Database connection helpers for the bullet improver.

Provides the async PostgreSQL connection pool (asyncpg). The pool is
created once at application startup and handed to the stores that need
it; nothing in this module keeps it as hidden global state.
"""

import logging
import pathlib
from contextlib import asynccontextmanager

import asyncpg

logger = logging.getLogger(__name__)

SCHEMA_PATH = pathlib.Path(__file__).parent / "schema.sql"


async def init_db_pool(
    dsn: str,
    min_size: int = 1,
    max_size: int = 10,
    command_timeout: float = 60.0,
) -> asyncpg.Pool:
    """
    Create the database connection pool.

    Should be called once at application startup.
    """
    logger.info(f"Initializing database pool (min={min_size}, max={max_size})")

    try:
        pool = await asyncpg.create_pool(
            dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )
    except Exception as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise

    logger.info("Database pool initialized successfully")
    return pool


async def close_db_pool(pool: asyncpg.Pool) -> None:
    """Close the pool at application shutdown."""
    logger.info("Closing database pool")
    await pool.close()
    logger.info("Database pool closed")


@asynccontextmanager
async def get_connection(pool: asyncpg.Pool):
    """
    Async context manager to acquire a connection from the pool.

    Usage:
        async with get_connection(pool) as conn:
            rows = await conn.fetch("SELECT * FROM requests")
    """
    async with pool.acquire() as connection:
        yield connection


async def init_schema(pool: asyncpg.Pool) -> None:
    """
    Initialize the database schema.

    Reads and executes the schema.sql file next to this module.
    """
    if not SCHEMA_PATH.exists():
        logger.error(f"Schema file not found: {SCHEMA_PATH}")
        raise FileNotFoundError(f"Schema file not found: {SCHEMA_PATH}")

    logger.info(f"Initializing database schema from {SCHEMA_PATH}")

    async with get_connection(pool) as conn:
        await conn.execute(SCHEMA_PATH.read_text())

    logger.info("Database schema initialized successfully")


async def health_check(pool: asyncpg.Pool) -> dict:
    """
    Check database connectivity and return health status.
    """
    try:
        async with get_connection(pool) as conn:
            await conn.fetchval("SELECT 1")
        return {
            "status": "healthy",
            "database": "connected",
            "pool_size": pool.get_size(),
            "pool_free": pool.get_idle_size(),
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
        }
