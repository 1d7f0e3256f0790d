import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import asyncpg
from asyncpg import Connection
from asyncpg import exceptions as pg_errors

from app.core.exceptions import ConcurrentModification, StorageUnavailable

logger = logging.getLogger(__name__)

CONFLICT_ERRORS = (
    pg_errors.SerializationError,
    pg_errors.DeadlockDetectedError,
    pg_errors.LockNotAvailableError,
)

UNAVAILABLE_ERRORS = (
    asyncpg.PostgresConnectionError,
    pg_errors.ConnectionDoesNotExistError,
    pg_errors.QueryCanceledError,
    pg_errors.TooManyConnectionsError,
    asyncio.TimeoutError,
    OSError,
)


@asynccontextmanager
async def translate_storage_errors(operation: str) -> AsyncIterator[None]:
    """Re-raise driver failures as ConcurrentModification / StorageUnavailable."""
    try:
        yield
    except CONFLICT_ERRORS as e:
        logger.warning("Storage conflict during %s: %s", operation, e)
        raise ConcurrentModification(
            "The card was modified concurrently, retry the operation.", operation=operation
        ) from e
    except UNAVAILABLE_ERRORS as e:
        logger.error("Storage unavailable during %s", operation, exc_info=True)
        raise StorageUnavailable("Card storage is unavailable.", operation=operation) from e


class BaseRepository:
    """Shared asyncpg plumbing: every query runs through error translation."""

    def __init__(self, conn: Connection):
        self.conn = conn

    @asynccontextmanager
    async def transaction(self, **options) -> AsyncIterator[None]:
        async with translate_storage_errors("transaction"):
            async with self.conn.transaction(**options):
                yield

    async def _fetchrow(self, sql: str, *args) -> dict | None:
        async with translate_storage_errors("fetchrow"):
            record = await self.conn.fetchrow(sql, *args)
        return dict(record) if record else None

    async def _fetch(self, sql: str, *args) -> list[dict]:
        async with translate_storage_errors("fetch"):
            records = await self.conn.fetch(sql, *args)
        return [dict(r) for r in records]

    async def _fetchval(self, sql: str, *args):
        async with translate_storage_errors("fetchval"):
            return await self.conn.fetchval(sql, *args)

    async def _execute(self, sql: str, *args) -> str:
        async with translate_storage_errors("execute"):
            return await self.conn.execute(sql, *args)
