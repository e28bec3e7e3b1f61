from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from src.database import Database
from src.links import storage
from src.links.schemas import DeleteResponse, ErrorResponse, Link, LinkId
from src.logging_config import get_logger

logger = get_logger("links")

router = APIRouter(
    prefix="/urls",
    tags=["links"],
    responses={500: {"model": ErrorResponse}},
)


def get_database(request: Request) -> Database:
    return request.app.state.database


def error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message})


# Create short aliases for URLs
@router.post("", response_model=Link)
async def create_url(link: Link, request: Request):
    async with get_database(request).connection() as connection:
        try:
            await storage.create_link(connection, link.id, link.url)
        except storage.StorageError as err:
            logger.error("Error shortening URL %r: %s", link.id, err)
            return error_response("Error shortening URL")
    return Link(id=link.id, url=link.url)


@router.delete("/delete", response_model=DeleteResponse)
async def delete_url(link: LinkId, request: Request):
    """Delete an alias. Unknown ids succeed the same way existing ones do."""
    async with get_database(request).connection() as connection:
        try:
            await storage.delete_link(connection, link.id)
        except storage.StorageError as err:
            logger.error("Error deleting Link %r: %s", link.id, err)
            return error_response("Error deleting Link")
    return DeleteResponse()


@router.get(
    "/{id}",
    status_code=302,
    response_class=RedirectResponse,
    responses={200: {"description": "No link stored for this id, empty body"}},
)
async def redirect_url(id: str, request: Request):
    async with get_database(request).connection() as connection:
        try:
            url = await storage.get_link(connection, id)
        except storage.StorageError as err:
            logger.error("Error redirecting %r to full URL: %s", id, err)
            return error_response("Error redirecting to full URL")

    if not url:
        # Missing ids answer 200 with an empty body rather than 404
        return Response(status_code=200)
    return RedirectResponse(url=url, status_code=302)
