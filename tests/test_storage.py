"""Tests for the storage access functions."""

import pytest

from src.links import storage


@pytest.fixture
async def connection(database):
    conn = await database.connect()
    yield conn
    await conn.close()


class TestStorage:

    async def test_create_then_get(self, connection):
        await storage.create_link(connection, "abc", "https://example.com")

        assert await storage.get_link(connection, "abc") == "https://example.com"

    async def test_get_missing_returns_empty_string(self, connection):
        assert await storage.get_link(connection, "missing") == ""

    async def test_delete_then_get(self, connection):
        await storage.create_link(connection, "abc", "https://example.com")
        await storage.delete_link(connection, "abc")

        assert await storage.get_link(connection, "abc") == ""

    async def test_delete_missing_is_noop(self, connection):
        await storage.delete_link(connection, "never-created")

        assert await storage.get_link(connection, "never-created") == ""

    async def test_create_duplicate_id_fails(self, database):
        conn = await database.connect()
        try:
            await storage.create_link(conn, "dup", "https://a.test")
            with pytest.raises(storage.StorageError):
                await storage.create_link(conn, "dup", "https://b.test")
        finally:
            await conn.close()

        # The first mapping survives the failed overwrite
        conn = await database.connect()
        try:
            assert await storage.get_link(conn, "dup") == "https://a.test"
        finally:
            await conn.close()

    async def test_visible_from_other_connection(self, database):
        writer = await database.connect()
        reader = await database.connect()
        try:
            await storage.create_link(writer, "x", "https://a.test")
            assert await storage.get_link(reader, "x") == "https://a.test"
        finally:
            await writer.close()
            await reader.close()

    async def test_missing_table_raises_storage_error(self, empty_database):
        conn = await empty_database.connect()
        try:
            with pytest.raises(storage.StorageError):
                await storage.get_link(conn, "abc")
            with pytest.raises(storage.StorageError):
                await storage.create_link(conn, "abc", "https://example.com")
            with pytest.raises(storage.StorageError):
                await storage.delete_link(conn, "abc")
        finally:
            await conn.close()
