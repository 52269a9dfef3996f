"""Analytics snapshot value types and their JSON payload codec."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any

HOLDING_PERIOD_BUCKETS = ("0-3d", "4-7d", "8-30d", "31d+")


@dataclass(frozen=True)
class AnalyticsTotals:
    """Portfolio-level statistics over closed trades.

    Attributes:
        win_rate: Percentage of closed trades with positive PnL.
        average_pnl: Mean PnL per closed trade.
        average_pnl_pct: Mean of per-trade percentage returns.
        expectancy: Expected PnL per trade from win/loss averages.
        average_hold_days: Mean holding period in days.
        closed_trades: Number of closed trades.
    """

    win_rate: Decimal
    average_pnl: Decimal
    average_pnl_pct: Decimal
    expectancy: Decimal
    average_hold_days: Decimal
    closed_trades: int


@dataclass(frozen=True)
class StrategyMetric:
    """Win/loss statistics for one strategy archetype.

    Attributes:
        strategy: Archetype tag.
        total: Closed trades in this group.
        wins: Trades with strictly positive PnL.
        losses: Trades with strictly negative PnL.
        average_pnl: Mean PnL of the group.
    """

    strategy: str
    total: int
    wins: int
    losses: int
    average_pnl: Decimal


@dataclass(frozen=True)
class EquityPoint:
    """Cumulative realized PnL after one closed trade.

    Attributes:
        date: Close date of the trade.
        cumulative_pnl: Running PnL total including this trade.
    """

    date: date
    cumulative_pnl: Decimal


@dataclass(frozen=True)
class HoldingBucket:
    """Closed-trade count for one holding-period range.

    Attributes:
        bucket: Bucket label.
        count: Trades whose holding days fall in the bucket.
    """

    bucket: str
    count: int


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Point-in-time analytics result for one user.

    Attributes:
        generated_at: Computation timestamp.
        totals: Portfolio totals.
        strategy_breakdown: Per-archetype statistics, largest group first.
        equity_curve: Chronological cumulative PnL points.
        holding_periods: Holding-period buckets in fixed order.
    """

    generated_at: datetime
    totals: AnalyticsTotals
    strategy_breakdown: tuple[StrategyMetric, ...]
    equity_curve: tuple[EquityPoint, ...]
    holding_periods: tuple[HoldingBucket, ...]


def domain_analytics_snapshot_to_payload(snapshot: AnalyticsSnapshot) -> dict[str, Any]:
    """Serialize an analytics snapshot to a JSON-compatible payload.

    Decimals are rendered as strings so stored payloads keep exact values.

    Args:
        snapshot: Snapshot to serialize.

    Returns:
        dict[str, Any]: JSON-compatible snapshot payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "generated_at": snapshot.generated_at.isoformat(),
        "totals": {
            "win_rate": str(snapshot.totals.win_rate),
            "average_pnl": str(snapshot.totals.average_pnl),
            "average_pnl_pct": str(snapshot.totals.average_pnl_pct),
            "expectancy": str(snapshot.totals.expectancy),
            "average_hold_days": str(snapshot.totals.average_hold_days),
            "closed_trades": snapshot.totals.closed_trades,
        },
        "strategy_breakdown": [
            {
                "strategy": metric.strategy,
                "total": metric.total,
                "wins": metric.wins,
                "losses": metric.losses,
                "average_pnl": str(metric.average_pnl),
            }
            for metric in snapshot.strategy_breakdown
        ],
        "equity_curve": [
            {"date": point.date.isoformat(), "cumulative_pnl": str(point.cumulative_pnl)}
            for point in snapshot.equity_curve
        ],
        "holding_periods": [{"bucket": bucket.bucket, "count": bucket.count} for bucket in snapshot.holding_periods],
    }


def domain_analytics_snapshot_from_payload(payload: dict[str, Any]) -> AnalyticsSnapshot:
    """Rebuild an analytics snapshot from its JSON payload.

    Args:
        payload: Payload produced by `domain_analytics_snapshot_to_payload`.

    Returns:
        AnalyticsSnapshot: Typed snapshot.

    Raises:
        ValueError: Raised when payload shape or values are invalid.
    """

    if not isinstance(payload, dict):
        raise ValueError("snapshot payload must be an object")

    try:
        totals_payload = payload["totals"]
        return AnalyticsSnapshot(
            generated_at=datetime.fromisoformat(payload["generated_at"]),
            totals=AnalyticsTotals(
                win_rate=Decimal(totals_payload["win_rate"]),
                average_pnl=Decimal(totals_payload["average_pnl"]),
                average_pnl_pct=Decimal(totals_payload["average_pnl_pct"]),
                expectancy=Decimal(totals_payload["expectancy"]),
                average_hold_days=Decimal(totals_payload["average_hold_days"]),
                closed_trades=int(totals_payload["closed_trades"]),
            ),
            strategy_breakdown=tuple(
                StrategyMetric(
                    strategy=str(item["strategy"]),
                    total=int(item["total"]),
                    wins=int(item["wins"]),
                    losses=int(item["losses"]),
                    average_pnl=Decimal(item["average_pnl"]),
                )
                for item in payload["strategy_breakdown"]
            ),
            equity_curve=tuple(
                EquityPoint(date=date.fromisoformat(item["date"]), cumulative_pnl=Decimal(item["cumulative_pnl"]))
                for item in payload["equity_curve"]
            ),
            holding_periods=tuple(
                HoldingBucket(bucket=str(item["bucket"]), count=int(item["count"]))
                for item in payload["holding_periods"]
            ),
        )
    except (KeyError, TypeError, ArithmeticError) as error:
        raise ValueError(f"snapshot payload is malformed: {error}") from error


__all__ = [
    "HOLDING_PERIOD_BUCKETS",
    "AnalyticsSnapshot",
    "AnalyticsTotals",
    "EquityPoint",
    "HoldingBucket",
    "StrategyMetric",
    "domain_analytics_snapshot_from_payload",
    "domain_analytics_snapshot_to_payload",
]
