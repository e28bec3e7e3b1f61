from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection

from src.links.models import links


class StorageError(Exception):
    """A storage call reached the backend and failed there."""


async def create_link(connection: AsyncConnection, id: str, url: str) -> None:
    try:
        await connection.execute(insert(links).values(id=id, url=url))
        await connection.commit()
    except SQLAlchemyError as err:
        raise StorageError(str(err)) from err


async def delete_link(connection: AsyncConnection, id: str) -> None:
    """Remove the mapping for ``id``. Deleting an unknown id is a no-op."""
    try:
        await connection.execute(delete(links).where(links.c.id == id))
        await connection.commit()
    except SQLAlchemyError as err:
        raise StorageError(str(err)) from err


async def get_link(connection: AsyncConnection, id: str) -> str:
    """Return the stored URL for ``id``, or an empty string if there is none."""
    try:
        result = await connection.execute(select(links.c.url).where(links.c.id == id))
    except SQLAlchemyError as err:
        raise StorageError(str(err)) from err
    url = result.scalar()
    return url or ""
