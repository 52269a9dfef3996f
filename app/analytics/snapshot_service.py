"""Cached portfolio analytics snapshot service."""
# pylint: disable=too-few-public-methods

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from uuid import UUID

from app.db import AnalyticsSnapshotRepositoryPort, StoredAnalyticsSnapshotRecord, TradeRepositoryPort

from .interfaces import AnalyticsSnapshotServicePort, AnalyticsSummaryResult, SnapshotCacheState
from .metrics import analytics_compute_snapshot
from .report_dates import analytics_resolve_report_date

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_LABEL = "portfolio"
DEFAULT_FRESHNESS_WINDOW = timedelta(hours=24)


def analytics_utc_now() -> datetime:
    """Return the current offset-aware UTC timestamp."""

    return datetime.now(timezone.utc)


def analytics_resolve_snapshot_state(
    stored_snapshot: StoredAnalyticsSnapshotRecord | None,
    now: datetime,
    freshness_window: timedelta,
) -> SnapshotCacheState:
    """Resolve the cache state of a stored snapshot at a point in time.

    Args:
        stored_snapshot: Latest stored snapshot, or None.
        now: Offset-aware evaluation timestamp.
        freshness_window: Maximum age of a fresh snapshot.

    Returns:
        SnapshotCacheState: `absent`, `fresh`, or `stale`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if stored_snapshot is None:
        return SnapshotCacheState.ABSENT
    if now - stored_snapshot.calculated_at > freshness_window:
        return SnapshotCacheState.STALE
    return SnapshotCacheState.FRESH


class PortfolioAnalyticsSnapshotService(AnalyticsSnapshotServicePort):
    """Serve per-user analytics snapshots from cache or by recomputation."""

    def __init__(
        self,
        trade_repository: TradeRepositoryPort,
        snapshot_repository: AnalyticsSnapshotRepositoryPort,
        default_label: str = DEFAULT_SNAPSHOT_LABEL,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        report_timezone: str = "UTC",
        clock: Callable[[], datetime] = analytics_utc_now,
    ):
        """Initialize snapshot service dependencies.

        Args:
            trade_repository: DB-layer trade history reader.
            snapshot_repository: DB-layer snapshot store.
            default_label: Label used for portfolio-wide snapshots.
            freshness_window: Age after which a stored snapshot is stale.
            report_timezone: IANA timezone used to resolve report dates.
            clock: Source of offset-aware current timestamps.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if trade_repository is None:
            raise ValueError("trade_repository must not be None")
        if snapshot_repository is None:
            raise ValueError("snapshot_repository must not be None")
        if not default_label.strip():
            raise ValueError("default_label must not be blank")
        if freshness_window <= timedelta(0):
            raise ValueError("freshness_window must be positive")

        self._trade_repository = trade_repository
        self._snapshot_repository = snapshot_repository
        self._default_label = default_label.strip()
        self._freshness_window = freshness_window
        self._report_timezone = report_timezone
        self._clock = clock

    def analytics_get_summary(self, user_id: UUID) -> AnalyticsSummaryResult:
        """Return the cached snapshot, recomputing when absent or stale.

        Args:
            user_id: Owning user identifier.

        Returns:
            AnalyticsSummaryResult: Stored snapshot with `refreshed=False` when
            fresh, otherwise a recomputed one with `refreshed=True`.

        Raises:
            ValueError: Raised when repository inputs are invalid.
            RuntimeError: Raised when repository access fails.
        """

        stored_snapshot = self._snapshot_repository.db_analytics_snapshot_get_latest(
            user_id=user_id,
            label=self._default_label,
        )
        cache_state = analytics_resolve_snapshot_state(
            stored_snapshot=stored_snapshot,
            now=self._clock(),
            freshness_window=self._freshness_window,
        )

        if cache_state is SnapshotCacheState.FRESH and stored_snapshot is not None:
            return AnalyticsSummaryResult(
                snapshot=stored_snapshot.snapshot,
                report_date=stored_snapshot.report_date,
                calculated_at=stored_snapshot.calculated_at,
                refreshed=False,
            )

        logger.info("Recomputing analytics snapshot user_id=%s cache_state=%s", user_id, cache_state.value)
        return self._analytics_recompute_and_store(user_id)

    def analytics_force_recalculate(self, user_id: UUID) -> AnalyticsSummaryResult:
        """Recompute and store the snapshot regardless of cache state.

        Args:
            user_id: Owning user identifier.

        Returns:
            AnalyticsSummaryResult: Freshly stored summary with `refreshed=True`.

        Raises:
            ValueError: Raised when repository inputs are invalid.
            RuntimeError: Raised when repository access fails.
        """

        logger.info("Forcing analytics snapshot recompute user_id=%s", user_id)
        return self._analytics_recompute_and_store(user_id)

    def _analytics_recompute_and_store(self, user_id: UUID) -> AnalyticsSummaryResult:
        """Compute a snapshot from trade history and upsert it for today.

        Args:
            user_id: Owning user identifier.

        Returns:
            AnalyticsSummaryResult: Stored summary with `refreshed=True`.

        Raises:
            RuntimeError: Raised when repository access fails.
        """

        now = self._clock()
        trades = self._trade_repository.db_trade_list_for_user(user_id=user_id)
        snapshot = analytics_compute_snapshot(trades, generated_at=now)
        stored_snapshot = self._snapshot_repository.db_analytics_snapshot_upsert(
            user_id=user_id,
            snapshot=snapshot,
            label=self._default_label,
            report_date=analytics_resolve_report_date(now, self._report_timezone),
            calculated_at=now,
        )
        return AnalyticsSummaryResult(
            snapshot=stored_snapshot.snapshot,
            report_date=stored_snapshot.report_date,
            calculated_at=stored_snapshot.calculated_at,
            refreshed=True,
        )


__all__ = [
    "DEFAULT_FRESHNESS_WINDOW",
    "DEFAULT_SNAPSHOT_LABEL",
    "PortfolioAnalyticsSnapshotService",
    "analytics_resolve_snapshot_state",
    "analytics_utc_now",
]
