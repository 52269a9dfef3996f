"""Analytics API router composition for cached portfolio summary reads."""

from __future__ import annotations

from fastapi import APIRouter, Header, status
from fastapi.responses import JSONResponse

from app.analytics import AnalyticsSnapshotServicePort, AnalyticsSummaryResult
from app.domain import domain_analytics_snapshot_to_payload

from ..identity import api_parse_user_id, api_unauthorized_response


def api_create_analytics_router(snapshot_service: AnalyticsSnapshotServicePort) -> APIRouter:
    """Create analytics router exposing summary read and forced recompute.

    Args:
        snapshot_service: Analytics-layer snapshot service.

    Returns:
        APIRouter: Router exposing `/analytics` endpoints.

    Raises:
        ValueError: Raised when snapshot_service is invalid.
    """

    if snapshot_service is None:
        raise ValueError("snapshot_service must not be None")

    router = APIRouter(prefix="/analytics", tags=["analytics"])

    @router.get("/summary")
    def api_analytics_summary(x_user_id: str | None = Header(default=None)) -> JSONResponse:
        """Return the caller's analytics summary, recomputing when stale.

        Args:
            x_user_id: Caller identity header.

        Returns:
            JSONResponse: Summary envelope payload.

        Raises:
            RuntimeError: Raised when repository access fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        summary_result = snapshot_service.analytics_get_summary(user_id)
        return JSONResponse(content=api_serialize_analytics_summary(summary_result), status_code=status.HTTP_200_OK)

    @router.post("/recalculate")
    def api_analytics_recalculate(x_user_id: str | None = Header(default=None)) -> JSONResponse:
        """Force recompute of the caller's analytics summary.

        Args:
            x_user_id: Caller identity header.

        Returns:
            JSONResponse: Summary envelope payload with status 201.

        Raises:
            RuntimeError: Raised when repository access fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        summary_result = snapshot_service.analytics_force_recalculate(user_id)
        return JSONResponse(
            content=api_serialize_analytics_summary(summary_result),
            status_code=status.HTTP_201_CREATED,
        )

    return router


def api_serialize_analytics_summary(summary_result: AnalyticsSummaryResult) -> dict[str, object]:
    """Serialize one summary result to the response envelope.

    Args:
        summary_result: Snapshot service result.

    Returns:
        dict[str, object]: JSON-serializable summary envelope.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "data": domain_analytics_snapshot_to_payload(summary_result.snapshot),
        "report_date": summary_result.report_date.isoformat(),
        "calculated_at": summary_result.calculated_at.isoformat(),
        "refreshed": summary_result.refreshed,
    }
