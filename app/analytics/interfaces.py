"""Typed interfaces for analytics-layer services."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Protocol
from uuid import UUID

from app.domain import AnalyticsSnapshot


class SnapshotCacheState(str, Enum):
    """Cache state of a user's stored portfolio snapshot."""

    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True)
class AnalyticsSummaryResult:
    """Snapshot returned to summary callers.

    Attributes:
        snapshot: Analytics snapshot content.
        report_date: Report date the snapshot is stored under.
        calculated_at: Timestamp of the stored calculation.
        refreshed: Whether the snapshot was recomputed by this call.
    """

    snapshot: AnalyticsSnapshot
    report_date: date
    calculated_at: datetime
    refreshed: bool


class AnalyticsSnapshotServicePort(Protocol):
    """Port definition for cached portfolio analytics reads and recomputes."""

    def analytics_get_summary(self, user_id: UUID) -> AnalyticsSummaryResult:
        """Return the cached snapshot, recomputing when absent or stale.

        Args:
            user_id: Owning user identifier.

        Returns:
            AnalyticsSummaryResult: Summary with refresh indicator.

        Raises:
            RuntimeError: Raised when repository access fails.
        """

    def analytics_force_recalculate(self, user_id: UUID) -> AnalyticsSummaryResult:
        """Recompute and store the snapshot regardless of cache state.

        Args:
            user_id: Owning user identifier.

        Returns:
            AnalyticsSummaryResult: Freshly stored summary.

        Raises:
            RuntimeError: Raised when repository access fails.
        """
