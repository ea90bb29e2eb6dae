from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pagewire import __version__
from pagewire.api.models import fail
from pagewire.api.router import router as api_router
from pagewire.config import ServerConfig
from pagewire.schema import PagewireApp
from pagewire.ui.router import router as ui_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _attach_file_logging(config: ServerConfig) -> RotatingFileHandler | None:
    """Attach the rotating log file; returns the handler added, if any."""

    if not config.logging.file:
        return None

    log_path = Path(config.logging.file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(config.logging.level.upper())
    # Avoid adding duplicate handlers if reloaded
    for h in root.handlers:
        if isinstance(h, RotatingFileHandler) and Path(h.baseFilename) == log_path.resolve():
            return None

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=config.logging.max_size_mb * 1024 * 1024,
        backupCount=config.logging.backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)
    return file_handler


def _detach_file_logging(handler: RotatingFileHandler | None) -> None:
    if handler is None:
        return
    logging.getLogger().removeHandler(handler)
    handler.close()


def _status_to_code(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code == 405:
        return "method_not_allowed"
    if status_code == 422:
        return "validation_error"
    if 400 <= status_code < 500:
        return "client_error"
    return "server_error"


def create_app(app_def: PagewireApp, config: ServerConfig | None = None) -> FastAPI:
    """Expose a built pagewire app over HTTP.

    The schema and the handler registry are read-only from here on; every
    request gets its own ActionContext.
    """

    config = config or ServerConfig()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        file_handler = _attach_file_logging(config)
        logger.info(
            "Pagewire starting up: %d page(s), %d action(s)",
            len(app_def.schema.pages),
            len(app_def.actions),
        )
        try:
            yield
        finally:
            logger.info("Pagewire shutting down")
            _detach_file_logging(file_handler)

    app = FastAPI(title="Pagewire", version=__version__, lifespan=_lifespan)
    app.state.pagewire_app = app_def
    app.state.pagewire_config = config

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Malformed bodies never reach action dispatch.
        return JSONResponse(
            status_code=422,
            content=fail(
                code="validation_error",
                message="Request validation failed",
                details=jsonable_encoder(exc.errors()),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(
                code=_status_to_code(exc.status_code),
                message=str(exc.detail),
            ).model_dump(mode="json"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _starlette_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=fail(
                code=_status_to_code(exc.status_code),
                message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
            ).model_dump(mode="json"),
        )

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=fail(code="internal_error", message="Internal server error").model_dump(
                mode="json"
            ),
        )

    app.include_router(api_router)
    if config.ui.enabled:
        app.include_router(ui_router)

    return app
