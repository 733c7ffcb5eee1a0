"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ursol.api.endpoints import health
from ursol.api.router import api_router
from ursol.core.config import settings
from ursol.core.database import close_database, init_database
from ursol.core.locks import KeyedLocks
from ursol.schemas.responses import RootResponse
from ursol.services.ledger.poller import poll_ledger_events
from ursol.services.ledger.simulated import SimulatedLedger
from ursol.utils.logging import get_logger
from ursol.utils.responses import format_validation_errors

LOGGER = get_logger(__name__, level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )
    if not settings.worldcoin.has_credentials:
        LOGGER.warning("APP_ID/DEV_PORTAL_API_KEY not set, payment rail verification will be skipped")

    await init_database(seed=settings.seed_demo_data)

    app.state.ledger = SimulatedLedger()
    app.state.locks = KeyedLocks()

    poll_task: Optional[asyncio.Task] = None
    if settings.ledger.poll_enabled:
        poll_task = asyncio.create_task(
            poll_ledger_events(app.state.ledger, settings.ledger.poll_interval)
        )

    yield

    # Shutdown
    LOGGER.info("Shutting down application")

    if poll_task is not None:
        poll_task.cancel()
        try:
            await poll_task
        except asyncio.CancelledError:
            LOGGER.info("Ledger polling task cancelled")

    await close_database()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Insurance policies, staking and borrowing on the URSOL token",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# Correlation ID middleware
@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", str(uuid4()))
    request.state.correlation_id = correlation_id
    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


# CORS middleware - added last to ensure it wraps all other middleware/responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed bodies with 400 and one aggregated message."""
    message = format_validation_errors(exc)
    LOGGER.info(f"Request validation failed: {message}", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": {"error": "ValidationError", "message": message, "detail": {}}},
    )


# Include routers
app.include_router(api_router, prefix=settings.api_prefix)
app.include_router(health.router, prefix="/health", tags=["Health"])


# Root endpoint
@app.get(
    "/",
    response_model=RootResponse,
    tags=["Root"],
    summary="Root endpoint",
    description="Get basic information about the API",
    operation_id="get_public_root_metadata",
)
async def root() -> RootResponse:
    """Root endpoint.

    Returns:
        RootResponse: Basic API information
    """
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        docs="/docs",
        health="/health",
    )


def main() -> None:
    import uvicorn

    uvicorn.run(
        "ursol.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
