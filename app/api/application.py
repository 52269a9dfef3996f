"""FastAPI application factory for the trade journal service.

This module defines API application composition and the scheduler lifecycle
bound to the application lifespan.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.analytics import AnalyticsSnapshotServicePort
from app.config import AppSettings
from app.db import DatabaseHealthPort, TradeWriteRepositoryPort
from app.jobs import AnalyticsRecalculationScheduler

from .identity import api_error_response
from .routers import api_create_analytics_router, api_create_health_router, api_create_trades_router


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    trade_repository: TradeWriteRepositoryPort,
    snapshot_service: AnalyticsSnapshotServicePort,
    recalculation_scheduler: AnalyticsRecalculationScheduler | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        trade_repository: Trade repository for journal endpoints.
        snapshot_service: Analytics snapshot service for summary endpoints.
        recalculation_scheduler: Optional scheduler started and stopped with the app.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        RuntimeError: Raised if application initialization fails.
    """

    @asynccontextmanager
    async def api_lifespan(_: FastAPI) -> AsyncIterator[None]:
        if recalculation_scheduler is not None:
            recalculation_scheduler.scheduler_start()
        try:
            yield
        finally:
            if recalculation_scheduler is not None:
                recalculation_scheduler.scheduler_shutdown()

    application = FastAPI(title="Options Trade Journal", lifespan=api_lifespan)

    @application.exception_handler(RequestValidationError)
    async def api_request_validation_error(_: Request, error: RequestValidationError) -> JSONResponse:
        """Map request validation failures to the 400 error envelope."""

        messages = [
            f"{'.'.join(str(part) for part in issue.get('loc', ()))}: {issue.get('msg', 'invalid value')}"
            for issue in error.errors()
        ]
        return api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_REQUEST", "; ".join(messages))

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service identification response.

        Returns:
            dict[str, str]: Service name, status and environment.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "options-trade-journal",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(api_create_trades_router(trade_repository=trade_repository))
    application.include_router(api_create_analytics_router(snapshot_service=snapshot_service))

    return application
