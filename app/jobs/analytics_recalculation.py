"""Job-layer orchestrator for best-effort analytics recompute across all users."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from app.analytics import AnalyticsSnapshotServicePort
from app.db import TradeRepositoryPort

from .interfaces import JobExecutionResult, JobOrchestratorPort, job_resolve_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsRecalculationResult(JobExecutionResult):
    """Result payload for one all-users recompute run.

    Attributes:
        processed_count: Number of users whose snapshot was recomputed.
        failed_user_ids: Users whose recompute raised.
    """

    processed_count: int
    failed_user_ids: tuple[UUID, ...]


class AnalyticsRecalculationOrchestrator(JobOrchestratorPort):
    """Recompute every user's portfolio snapshot, isolating per-user failures."""

    _RECALCULATE_JOB_NAME = "analytics_recalculate_all"

    def __init__(
        self,
        trade_repository: TradeRepositoryPort,
        snapshot_service: AnalyticsSnapshotServicePort,
    ):
        """Initialize recompute orchestrator dependencies.

        Args:
            trade_repository: DB-layer repository used to enumerate users.
            snapshot_service: Analytics snapshot service performing recomputes.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if trade_repository is None:
            raise ValueError("trade_repository must not be None")
        if snapshot_service is None:
            raise ValueError("snapshot_service must not be None")

        self._trade_repository = trade_repository
        self._snapshot_service = snapshot_service

    def job_supported_names(self) -> tuple[str, ...]:
        """Return supported job names.

        Returns:
            tuple[str, ...]: Supported job names.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return (self._RECALCULATE_JOB_NAME,)

    def job_execute(self, job_name: str) -> AnalyticsRecalculationResult:
        """Force-recalculate the snapshot of every user.

        A failure for one user is logged and recorded; remaining users are
        still processed. Status is `success` when nothing failed, `failed`
        when every user failed, and `partial_failure` otherwise.

        Args:
            job_name: Name of job to execute.

        Returns:
            AnalyticsRecalculationResult: Final execution status payload.

        Raises:
            ValueError: Raised when job name is unsupported.
            RuntimeError: Raised when the user list cannot be read.
        """

        normalized_job_name = job_name.strip()
        if normalized_job_name != self._RECALCULATE_JOB_NAME:
            raise ValueError(f"unsupported job_name={normalized_job_name}")

        user_ids = self._trade_repository.db_user_id_list()
        logger.info("Starting analytics recompute for %d users", len(user_ids))

        processed_count = 0
        failed_user_ids: list[UUID] = []
        for user_id in user_ids:
            try:
                self._snapshot_service.analytics_force_recalculate(user_id)
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("Analytics recompute failed user_id=%s", user_id)
                failed_user_ids.append(user_id)
                continue
            processed_count += 1

        status = job_resolve_status(processed_count, len(failed_user_ids))

        logger.info(
            "Finished analytics recompute status=%s processed=%d failed=%d",
            status,
            processed_count,
            len(failed_user_ids),
        )
        return AnalyticsRecalculationResult(
            job_name=normalized_job_name,
            status=status,
            processed_count=processed_count,
            failed_user_ids=tuple(failed_user_ids),
        )


__all__ = ["AnalyticsRecalculationOrchestrator", "AnalyticsRecalculationResult"]
