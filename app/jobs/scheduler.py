"""Background scheduler running the daily analytics recompute job."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from .interfaces import JobOrchestratorPort

logger = logging.getLogger(__name__)

ANALYTICS_RECALCULATE_JOB_ID = "analytics_recalculate_all"


class AnalyticsRecalculationScheduler:
    """Own one APScheduler instance that triggers the recompute orchestrator daily."""

    def __init__(
        self,
        orchestrator: JobOrchestratorPort,
        hour: int = 2,
        minute: int = 0,
        timezone: str = "UTC",
    ):
        """Initialize scheduler configuration.

        Args:
            orchestrator: Orchestrator exposing the `analytics_recalculate_all` job.
            hour: Hour of day the job runs.
            minute: Minute of hour the job runs.
            timezone: IANA timezone for the cron schedule.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when orchestrator or schedule values are invalid.
        """

        if orchestrator is None:
            raise ValueError("orchestrator must not be None")
        if ANALYTICS_RECALCULATE_JOB_ID not in orchestrator.job_supported_names():
            raise ValueError(f"orchestrator does not support job_name={ANALYTICS_RECALCULATE_JOB_ID}")
        if not 0 <= hour <= 23:
            raise ValueError("hour must be between 0 and 23")
        if not 0 <= minute <= 59:
            raise ValueError("minute must be between 0 and 59")

        self._orchestrator = orchestrator
        self._trigger = CronTrigger(hour=hour, minute=minute, timezone=timezone)
        self._scheduler: BackgroundScheduler | None = None

    def scheduler_is_running(self) -> bool:
        """Return whether the background scheduler has been started."""

        return self._scheduler is not None

    def scheduler_start(self) -> None:
        """Start the background scheduler once and register the daily job.

        Returns:
            None: Scheduler is started as side effect.

        Raises:
            RuntimeError: Raised when APScheduler cannot start.
        """

        if self._scheduler is not None:
            return

        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.scheduler_run_job,
            trigger=self._trigger,
            id=ANALYTICS_RECALCULATE_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Analytics recompute scheduler started trigger=%s", self._trigger)

    def scheduler_shutdown(self) -> None:
        """Stop the background scheduler without waiting for running jobs."""

        if self._scheduler is None:
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Analytics recompute scheduler stopped")

    def scheduler_run_job(self) -> None:
        """Execute the recompute job once, logging instead of raising.

        Returns:
            None: Execution result is logged.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        try:
            execution_result = self._orchestrator.job_execute(job_name=ANALYTICS_RECALCULATE_JOB_ID)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Scheduled analytics recompute failed")
            return
        logger.info("Scheduled analytics recompute finished status=%s", execution_result.status)


__all__ = ["ANALYTICS_RECALCULATE_JOB_ID", "AnalyticsRecalculationScheduler"]
