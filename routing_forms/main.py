"""FastAPI application entry point for the Routing Forms service.

This module initializes the FastAPI application, sets up logging,
registers routers, and maps domain errors to HTTP responses.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routing_forms.config import get_settings
from routing_forms.logging_config import setup_logging, get_logger
from routing_forms.models.database import Base, engine
from routing_forms.routes import health, routing_forms
from routing_forms.services.form_service import (
    FormNotFoundError,
    FormResponseConflictError,
)

VERSION = "1.0.0"

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Startup:
    - Configure logging
    - Create missing tables when auto_create_tables is enabled

    Shutdown:
    - Dispose of the connection pool
    """
    settings = get_settings()
    setup_logging()

    if settings.auto_create_tables:
        Base.metadata.create_all(engine)
        logger.info("Database tables created")

    logger.info(
        f"Routing Forms starting - "
        f"Environment: {settings.environment}, "
        f"Log Level: {settings.log_level}, "
        f"Database: {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'configured'}, "
        f"Version: {VERSION}"
    )

    yield

    logger.info("Routing Forms shutting down")
    engine.dispose()


app = FastAPI(
    title="Routing Forms",
    description="Routing form definitions and responses backed by a relational database",
    version=VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict:
    """Root endpoint with basic API information."""
    settings = get_settings()
    return {
        "service": "Routing Forms",
        "version": VERSION,
        "environment": settings.environment,
        "status": "operational"
    }


app.include_router(health.router, tags=["Health"])
app.include_router(routing_forms.router, tags=["Routing Forms"])


@app.exception_handler(FormResponseConflictError)
async def conflict_exception_handler(
    request: Request, exc: FormResponseConflictError
) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"error": exc.code, "message": str(exc)}
    )


@app.exception_handler(FormNotFoundError)
async def not_found_exception_handler(
    request: Request, exc: FormNotFoundError
) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": exc.code, "message": str(exc)}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions.

    Logs all unhandled exceptions and returns a generic error response
    to prevent leaking database details.
    """
    logger.error(
        f"Unhandled exception for {request.method} {request.url}: {exc}",
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later."
        }
    )
