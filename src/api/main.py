"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, exception handlers, static files and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from src.api.dependencies import build_registration_service, get_registration_service, init_stores
from src.api.errors import register_exception_handlers
from src.api.models import HealthResponse
from src.api.reaper import ExpiredVerificationReaper
from src.api.routes import router as api_router
from src.config.settings import get_settings
from src.domain.registration import RegistrationService

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "accounts",
        "description": "Register by email link, log in and list client accounts",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the in-memory stores on startup
    - Starts the expired verification reaper
    - Stops the reaper on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    init_stores(app.state)

    service = build_registration_service(app.state, settings)
    reaper = ExpiredVerificationReaper(service.purge_expired, settings.reaper_interval_seconds)
    reaper.start()
    app.state.reaper = reaper

    logger.info("Application startup complete, serving static files from %s", settings.public_dir)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await reaper.stop()


app = FastAPI(
    title="tinakaward",
    description="Account onboarding API - email link verification with Stellar keypair provisioning",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api")


@app.get("/health", response_model=HealthResponse)
async def health_check(service: RegistrationService = Depends(get_registration_service)) -> HealthResponse:
    """
    Health check endpoint.

    Returns 200 OK with the number of pending verifications held in memory.
    """
    return HealthResponse(status="healthy", pending_verifications=service.pending_count())


@app.get("/success-redirect.html", include_in_schema=False)
async def success_page() -> FileResponse:
    """Landing page the verification link redirects to."""
    return FileResponse(get_settings().public_dir / "success-redirect.html")


# Mounted last so the API routes above take precedence.
app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")


def run() -> None:
    """Serve the application with uvicorn on the configured address."""
    logger.info("Starting server on %s:%d", settings.host, settings.port)
    uvicorn.run("src.api.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
