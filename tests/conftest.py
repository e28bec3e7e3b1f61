"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from src.database import Database, DatabaseConnectionError
from src.logging_config import setup_logging
from src.main import create_app


class UnreachableDatabase(Database):
    """Stands in for a database whose pool cannot hand out connections."""

    def __init__(self):
        super().__init__("sqlite+aiosqlite://")
        self.connects = 0

    async def connect(self):
        self.connects += 1
        raise DatabaseConnectionError("connection refused")


@pytest.fixture
def logger():
    return setup_logging(level="DEBUG")


@pytest.fixture
async def database(tmp_path, logger):
    """SQLite database in a temp file, links table created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
async def empty_database(tmp_path, logger):
    """Reachable database without the links table, so every query fails."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    yield db
    await db.dispose()


async def make_client(db):
    app = create_app(db)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.fixture
async def client(database):
    async with await make_client(database) as ac:
        yield ac


@pytest.fixture
def unreachable_database(logger):
    return UnreachableDatabase()


@pytest.fixture
async def unreachable_client(unreachable_database):
    async with await make_client(unreachable_database) as ac:
        yield ac


@pytest.fixture
async def failing_client(empty_database):
    async with await make_client(empty_database) as ac:
        yield ac
