import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine

from src.links.models import metadata


class DatabaseConnectionError(Exception):
    """A pooled connection could not be handed out."""


class Database:
    """Owns the engine and its connection pool for the whole process."""

    def __init__(self, url: str, **engine_options):
        self.url = url
        self.engine = create_async_engine(url, **engine_options)

    async def connect(self) -> AsyncConnection:
        try:
            return await self.engine.connect()
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as err:
            raise DatabaseConnectionError(str(err)) from err

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[AsyncConnection]:
        # Closing returns the connection to the pool and rolls back anything
        # left uncommitted by a failed storage call.
        conn = await self.connect()
        try:
            yield conn
        finally:
            await conn.close()

    async def create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()
