"""Analytics layer package for trade classification, metrics and snapshot caching."""

from .interfaces import AnalyticsSnapshotServicePort, AnalyticsSummaryResult, SnapshotCacheState
from .metrics import (
	analytics_compute_snapshot,
	analytics_holding_bucket,
	analytics_holding_days,
	analytics_round_amount,
	analytics_trade_basis,
	analytics_trade_pnl,
)
from .report_dates import analytics_resolve_report_date
from .snapshot_service import (
	DEFAULT_FRESHNESS_WINDOW,
	DEFAULT_SNAPSHOT_LABEL,
	PortfolioAnalyticsSnapshotService,
	analytics_resolve_snapshot_state,
	analytics_utc_now,
)
from .strategy_classifier import (
	STRATEGY_ARCHETYPES,
	STRATEGY_IRON_CONDOR,
	STRATEGY_OTHER,
	STRATEGY_SINGLE,
	STRATEGY_VERTICAL_SPREAD,
	analytics_classify_strategy,
)

__all__ = [
	"AnalyticsSnapshotServicePort",
	"AnalyticsSummaryResult",
	"SnapshotCacheState",
	"DEFAULT_FRESHNESS_WINDOW",
	"DEFAULT_SNAPSHOT_LABEL",
	"PortfolioAnalyticsSnapshotService",
	"STRATEGY_ARCHETYPES",
	"STRATEGY_IRON_CONDOR",
	"STRATEGY_OTHER",
	"STRATEGY_SINGLE",
	"STRATEGY_VERTICAL_SPREAD",
	"analytics_classify_strategy",
	"analytics_compute_snapshot",
	"analytics_holding_bucket",
	"analytics_holding_days",
	"analytics_resolve_report_date",
	"analytics_resolve_snapshot_state",
	"analytics_round_amount",
	"analytics_trade_basis",
	"analytics_trade_pnl",
	"analytics_utc_now",
]
