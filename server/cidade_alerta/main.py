"""Cidade Alerta server: main entry point.

This is the only file that knows about concrete implementations.
It wires together the core, storage, auth and API layers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TextIO

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cidade_alerta.api.dashboard import router as dashboard_router
from cidade_alerta.api.monitoring import router as monitoring_router
from cidade_alerta.api.reports import router as reports_router
from cidade_alerta.auth.base import IdentityProvider
from cidade_alerta.auth.jwt_provider import JwtIdentityProvider
from cidade_alerta.auth.users import JsonlUserDirectory, MemoryUserDirectory
from cidade_alerta.config import AppConfig, load_config
from cidade_alerta.core.errors import (
    AuthenticationError,
    ForbiddenError,
    InvalidCoordinateError,
    NotFoundError,
)
from cidade_alerta.storage.base import ReportStore
from cidade_alerta.storage.file_storage import JsonlReportStore
from cidade_alerta.storage.memory_storage import MemoryReportStore

log = structlog.get_logger()

VERSION = "0.1.0"

# Module-level singletons (set during startup)
_store: ReportStore | None = None
_identity: IdentityProvider | None = None
_config: AppConfig | None = None
_log_file: TextIO | None = None


def get_store() -> ReportStore:
    assert _store is not None, "Server not initialized"
    return _store


def get_identity() -> IdentityProvider:
    assert _identity is not None, "Server not initialized"
    return _identity


def get_config() -> AppConfig:
    assert _config is not None, "Server not initialized"
    return _config


def _setup_logging(config: AppConfig) -> None:
    """Configure structlog based on the logging config."""
    global _log_file

    _close_log_file()
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if config.logging.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=not config.logging.file))

    logger_factory = structlog.PrintLoggerFactory()
    if config.logging.file:
        _log_file = Path(config.logging.file).open("a", encoding="utf-8")
        logger_factory = structlog.WriteLoggerFactory(file=_log_file)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.logging.level.upper()),
        ),
        logger_factory=logger_factory,
    )


def _close_log_file() -> None:
    global _log_file

    if _log_file is not None:
        _log_file.close()
        _log_file = None


def build_components(config: AppConfig) -> tuple[ReportStore, IdentityProvider]:
    """Create the report store and identity provider for a config."""
    if config.storage.backend == "memory":
        store = MemoryReportStore()
        users = MemoryUserDirectory()
    elif config.storage.backend == "file":
        store = JsonlReportStore(base_dir=config.storage.base_dir)
        users = JsonlUserDirectory(base_dir=config.storage.base_dir)
    else:
        raise ValueError(f"unknown storage backend {config.storage.backend!r}")

    identity = JwtIdentityProvider(
        secret=config.auth.jwt_secret,
        users=users,
        algorithm=config.auth.jwt_algorithm,
    )
    return store, identity


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    global _store, _identity, _config

    _config = load_config()
    _setup_logging(_config)

    log.info("server_starting",
             env=_config.server.env,
             storage_backend=_config.storage.backend,
             storage_dir=_config.storage.base_dir)

    _store, _identity = build_components(_config)

    log.info("server_started",
             host=_config.server.host,
             port=_config.server.port)

    yield

    log.info("server_stopped")
    if _log_file is not None:
        # Later log calls go to stdout once the file is gone.
        structlog.configure(logger_factory=structlog.PrintLoggerFactory())
        _close_log_file()


app = FastAPI(
    title="Cidade Alerta",
    description="Civic issue reports: proximity, map markers and dashboard",
    version=VERSION,
    lifespan=lifespan,
)


@app.exception_handler(AuthenticationError)
async def _authentication_error(request: Request, exc: AuthenticationError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": str(exc)},
                        headers={"WWW-Authenticate": "Bearer"})


@app.exception_handler(ForbiddenError)
async def _forbidden_error(request: Request, exc: ForbiddenError) -> JSONResponse:
    return JSONResponse(status_code=403, content={"error": str(exc)})


@app.exception_handler(NotFoundError)
async def _not_found_error(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": str(exc)})


@app.exception_handler(InvalidCoordinateError)
async def _invalid_coordinate_error(request: Request, exc: InvalidCoordinateError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": str(exc)})


app.include_router(reports_router)
app.include_router(dashboard_router)
app.include_router(monitoring_router)
