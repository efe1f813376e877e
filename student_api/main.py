import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from student_api.api.router import api_router
from student_api.core.config import Settings, log_config, must_load_settings
from student_api.core.exceptions import StorageError
from student_api.core.handlers import error_envelope, register_exception_handlers
from student_api.core.logging import logger, setup_logging
from student_api.storage.base import Storage
from student_api.storage.factory import new_storage

APP_TITLE = "Student API"
APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Built lazily when the app runs under `uvicorn --factory`
    if app.state.storage is None:
        settings = app.state.settings or must_load_settings()
        app.state.settings = settings
        app.state.storage = open_storage(settings)
    try:
        yield
    finally:
        logger.info("Shutting down server...")
        app.state.storage.close()
        logger.info("Server shutdown successfully")


def create_app(storage: Optional[Storage] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around an already opened storage.

    Without a storage, one is opened from the settings at startup.
    """
    app = FastAPI(
        title=settings.PROJECT_NAME if settings else APP_TITLE,
        version=settings.APP_VERSION if settings else APP_VERSION,
        lifespan=lifespan,
    )
    app.state.storage = storage
    app.state.settings = settings

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def root(request: Request):
        """
        Service information
        """
        current = request.app.state.settings
        return {
            "message": f"Welcome to {app.title}",
            "docs": "/docs",
            "version": app.version,
            "env": current.ENV if current else None,
        }

    @app.get("/health")
    def health(request: Request):
        """
        Storage liveness probe
        """
        current = request.app.state.storage
        try:
            current.ping()
        except StorageError as e:
            logger.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content=error_envelope(e.code, e.message),
            )
        return {"status": "ok", "driver": current.driver}

    return app


def open_storage(settings: Settings) -> Storage:
    """Open the configured storage or terminate the process."""
    try:
        storage = new_storage(settings)
    except StorageError as e:
        logger.critical(f"Database initialization failed: {e}")
        sys.exit(1)
    logger.info(f"Using {storage.driver} database")
    return storage


def run(config_path: Optional[str] = None):
    """Entry point: load config, open storage, serve until SIGINT/SIGTERM."""
    setup_logging()
    settings = must_load_settings(config_path)
    setup_logging(settings.LOG_LEVEL)
    log_config(settings)

    app = create_app(open_storage(settings), settings)
    host, port = settings.bind_address

    logger.info(f"Server started address={settings.HTTP_ADDRESS}")
    # uvicorn traps SIGINT and SIGTERM, then waits for in-flight requests
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        timeout_graceful_shutdown=settings.SHUTDOWN_TIMEOUT,
    )
