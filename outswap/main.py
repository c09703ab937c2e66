"""
FastAPI application entry point
Main application factory and configuration
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from outswap.api.v1.api import build_api_router
from outswap.api.v1.schemas.common import ErrorResponse
from outswap.core.config import Settings, settings
from outswap.core.database import Database
from outswap.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def _error_response(status_code: int, error: str, errors: Optional[list] = None) -> JSONResponse:
    body = ErrorResponse(error=error, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


def _request_field(loc: tuple) -> str:
    # ("body", "pricePerDay") -> "pricePerDay"; ("query", "radius") -> "radius"
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


def create_app(config: Settings = settings, database: Optional[Database] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to run with
        database: Store client to use; when omitted one is created from
            DATABASE_URL at startup and disposed at shutdown
    """
    configure_logging(config.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Open the store on startup and close it on shutdown
        Reference: https://fastapi.tiangolo.com/advanced/events/
        """
        owns_database = database is None
        db = database or Database(config.DATABASE_URL, echo=config.DATABASE_ECHO)
        app.state.database = db

        try:
            await db.ping()
            logger.info("✓ Database connection successful")
        except Exception as e:
            # Let the app start so /health keeps answering; /health/ready reports 503
            logger.error(f"✗ Database connection failed: {e}")

        if config.AUTO_CREATE_TABLES:
            try:
                await db.create_all()
            except Exception as e:
                logger.warning(f"Could not create tables and indexes: {e}")

        yield

        if owns_database:
            await db.dispose()

    app = FastAPI(
        title=config.PROJECT_NAME,
        version=config.VERSION,
        description="Peer-to-peer outfit rental marketplace API",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    if database is not None:
        app.state.database = database

    origins = config.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentials with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if isinstance(exc.detail, dict):
            return _error_response(
                exc.status_code,
                exc.detail.get("error", "Request failed"),
                exc.detail.get("errors"),
            )
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {"field": _request_field(tuple(error.get("loc", ()))), "message": error.get("msg", "")}
            for error in exc.errors()
        ]
        logger.warning(f"{request.method} {request.url.path}: malformed request ({len(errors)} error(s))")
        return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation failed", errors)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            f"Unexpected error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
            exc_info=exc,
        )
        message = str(exc) if config.is_development else "Internal server error"
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    app.include_router(build_api_router(config.API_PREFIX))

    @app.get("/")
    async def root():
        """
        Root endpoint
        Provides basic information about the API
        """
        return {
            "message": f"Welcome to {config.PROJECT_NAME}",
            "version": config.VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()
