import socket
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

from src import config
from src.database import Database, DatabaseConnectionError
from src.links.router import router as links_router
from src.logging_config import get_logger, setup_logging
from src.middleware import LoggingMiddleware, NormalizePathMiddleware

VERSION = "1.0.0"

logger = get_logger("server")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database: Database = app.state.database
    if config.DB_CREATE_TABLES:
        await database.create_tables()
    yield
    await database.dispose()


async def database_connection_error_handler(request: Request, exc: DatabaseConnectionError):
    logger.error("Error connecting to database: %s", exc)
    return JSONResponse(status_code=500, content={"error": "Error connecting to database"})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and known paths with the wrong method look the same
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected request body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_app(database: Database) -> FastAPI:
    app = FastAPI(lifespan=lifespan, title="Link Alias API", version=VERSION, redirect_slashes=False)
    app.state.database = database

    app.add_exception_handler(DatabaseConnectionError, database_connection_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Last added runs first: normalize the path, log, then compress
    app.add_middleware(GZipMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(NormalizePathMiddleware)

    app.include_router(links_router, prefix="/api")
    return app


def run(sock: Optional[socket.socket] = None):
    """Serve until interrupted, on ``HOST:PORT`` or on an already bound socket."""
    setup_logging(config.LOG_LEVEL)
    app = create_app(Database(config.DATABASE_URL, pool_pre_ping=True))
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.HOST,
            port=config.PORT,
            timeout_keep_alive=config.KEEP_ALIVE,
            access_log=False,
            log_level=config.LOG_LEVEL.lower(),
        )
    )
    logger.info("Starting server on %s", sock.getsockname() if sock else f"{config.HOST}:{config.PORT}")
    server.run(sockets=[sock] if sock else None)


if __name__ == "__main__":
    run()
