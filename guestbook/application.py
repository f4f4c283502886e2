from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from guestbook.api.routers import api_routers
from guestbook.core.services.entry_service import utc_now
from guestbook.infrastructure.config.config import GuestbookConfig
from guestbook.infrastructure.database.adapters.sqlite_connection import DatabaseConnection
from guestbook.infrastructure.email.sender import EmailNotifier
from guestbook.infrastructure.errors.base import GuestbookError
from guestbook.infrastructure.logging import get_logger
from guestbook.infrastructure.middleware import LoggingMiddleware
from guestbook.utils.enums import ErrorTag


logger = get_logger(__name__)


def _error_body(tag: ErrorTag) -> dict[str, str]:
    return {"error": tag.value}


async def handle_guestbook_error(request: Request, exc: GuestbookError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("request_failed", path=request.url.path, error=exc.tag.value, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.tag))


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("request_body_invalid", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(ErrorTag.VALIDATION),
    )


async def handle_storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("storage_error", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(ErrorTag.STORAGE),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(ErrorTag.INTERNAL),
    )


def create_app(
    config: GuestbookConfig,
    notifier: EmailNotifier | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """
    Build the guestbook application around an explicit configuration.

    Everything request handlers need (database connection, notifier,
    clock and config) lives on ``app.state`` and is handed to the
    services by the dependencies in ``guestbook.api.dependencies``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("application_startup", app_name=config.app.APP_NAME, debug=config.app.DEBUG)

        db_connection = DatabaseConnection(config.db)
        await db_connection.create_schema()
        app.state.db_connection = db_connection

        logger.info("database_connected", db_file=config.db.DB_FILE)

        yield

        await db_connection.close()
        logger.info("application_shutdown")

    app = FastAPI(
        title=config.app.APP_NAME,
        debug=config.app.DEBUG,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.notifier = notifier or EmailNotifier(config.smtp, config.app)
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.CORS_ALLOWED_ORIGINS.split(","),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(GuestbookError, handle_guestbook_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_storage_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    if config.app.STATIC_DIR:
        static_dir = Path(config.app.STATIC_DIR)
        if static_dir.is_dir():
            app.mount("/static", StaticFiles(directory=static_dir), name="static")
            logger.info("static_files_mounted", directory=str(static_dir))
        else:
            logger.warning("static_directory_missing", directory=str(static_dir))

    app.include_router(api_routers)
    return app
