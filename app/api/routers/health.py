"""Health endpoint router reporting app, database and schema status."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.db import DatabaseHealthPort

logger = logging.getLogger(__name__)


def api_create_health_router(db_health_service: DatabaseHealthPort) -> APIRouter:
    """Create health-check router.

    Args:
        db_health_service: DB-layer health service interface.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when db_health_service is invalid.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return 200 when the database is reachable and migrated, 503 otherwise."""

        target = db_health_service.db_connection_label()
        try:
            db_health = db_health_service.db_check_health()
        except ConnectionError as error:
            logger.warning("Health check failed target=%s error=%s", target, error)
            payload = {"status": "degraded", "app": "up", "database": "down", "detail": str(error), "target": target}
            return JSONResponse(content=payload, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

        healthy = db_health.status == "ok"
        payload = {
            "status": "ok" if healthy else "degraded",
            "app": "up",
            "database": db_health.status,
            "detail": db_health.detail,
            "target": target,
        }
        response_status = status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=payload, status_code=response_status)

    return router
