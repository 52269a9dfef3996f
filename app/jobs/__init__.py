"""Job layer package for batch analytics recompute and its schedule."""

from .analytics_recalculation import AnalyticsRecalculationOrchestrator, AnalyticsRecalculationResult
from .interfaces import JobExecutionResult, JobOrchestratorPort, job_resolve_status
from .scheduler import ANALYTICS_RECALCULATE_JOB_ID, AnalyticsRecalculationScheduler

__all__ = [
	"ANALYTICS_RECALCULATE_JOB_ID",
	"AnalyticsRecalculationOrchestrator",
	"AnalyticsRecalculationResult",
	"AnalyticsRecalculationScheduler",
	"JobExecutionResult",
	"JobOrchestratorPort",
	"job_resolve_status",
]
