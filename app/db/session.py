import logging
from typing import AsyncGenerator

import asyncpg
from asyncpg import Connection
from asyncpg.pool import Pool

from app.core.config import settings
from app.core.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

db_pool: Pool | None = None

async def get_pool() -> Pool:
    global db_pool
    if db_pool is None:
        await connect_db_pool()
    return db_pool

async def connect_db_pool():
    global db_pool
    if db_pool is None:
        try:
            db_pool = await asyncpg.create_pool(
                dsn=settings.asyncpg_url,
                min_size=settings.DB_POOL_MIN_SIZE,
                max_size=settings.DB_POOL_MAX_SIZE,
                timeout=30,
                command_timeout=settings.DB_COMMAND_TIMEOUT,
            )
            logger.info("AsyncPG connection pool created.")
        except Exception:
            logger.exception("Error connecting to database")
            raise

async def close_db_pool():
    global db_pool
    if db_pool:
        await db_pool.close()
        db_pool = None
        logger.info("AsyncPG connection pool closed.")

async def get_db_connection() -> AsyncGenerator[Connection, None]:
    if db_pool is None:
        raise StorageUnavailable("Database pool is not initialized.")
    try:
        connection = await db_pool.acquire()
    except (OSError, TimeoutError, asyncpg.PostgresConnectionError) as e:
        raise StorageUnavailable("Could not acquire a database connection.") from e
    try:
        yield connection
    finally:
        await db_pool.release(connection)
