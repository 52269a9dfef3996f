"""Domain models used across application layer boundaries."""

from .analytics import (
    HOLDING_PERIOD_BUCKETS,
    AnalyticsSnapshot,
    AnalyticsTotals,
    EquityPoint,
    HoldingBucket,
    StrategyMetric,
    domain_analytics_snapshot_from_payload,
    domain_analytics_snapshot_to_payload,
)
from .models import HealthStatus
from .trades import (
    OPTION_LEG_POSITIONS,
    OPTION_LEG_TYPES,
    TRADE_SIDES,
    TRADE_STATUSES,
    OptionLegRecord,
    TradeRecord,
)

__all__ = [
    "HOLDING_PERIOD_BUCKETS",
    "OPTION_LEG_POSITIONS",
    "OPTION_LEG_TYPES",
    "TRADE_SIDES",
    "TRADE_STATUSES",
    "AnalyticsSnapshot",
    "AnalyticsTotals",
    "EquityPoint",
    "HealthStatus",
    "HoldingBucket",
    "OptionLegRecord",
    "StrategyMetric",
    "TradeRecord",
    "domain_analytics_snapshot_from_payload",
    "domain_analytics_snapshot_to_payload",
]
