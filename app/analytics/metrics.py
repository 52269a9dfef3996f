"""Portfolio metric aggregation over one user's trade history."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal

from app.domain import (
    HOLDING_PERIOD_BUCKETS,
    AnalyticsSnapshot,
    AnalyticsTotals,
    EquityPoint,
    HoldingBucket,
    StrategyMetric,
    TradeRecord,
)

from .strategy_classifier import analytics_classify_strategy

_ZERO = Decimal("0")
_ONE_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")
_SECONDS_PER_DAY = Decimal("86400")


@dataclass
class _StrategyAccumulator:
    """Mutable per-archetype running totals."""

    total: int = 0
    wins: int = 0
    losses: int = 0
    pnl_sum: Decimal = _ZERO


def analytics_round_amount(value: Decimal) -> Decimal:
    """Quantize a currency or percentage figure to 2 places, half up.

    Args:
        value: Full-precision value.

    Returns:
        Decimal: Value rounded to cents, never negative zero.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    rounded_value = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    if rounded_value == _ZERO:
        return Decimal("0.00")
    return rounded_value


def analytics_trade_pnl(trade: TradeRecord) -> Decimal:
    """Return realized PnL as net credit minus net debit, nulls as zero."""

    return _analytics_amount(trade.net_credit) - _analytics_amount(trade.net_debit)


def analytics_trade_basis(trade: TradeRecord) -> Decimal:
    """Return the denominator for percentage return.

    The absolute net debit is used when non-zero, then the absolute net
    credit, and `1` when both are zero or absent.
    """

    debit = abs(_analytics_amount(trade.net_debit))
    if debit > _ZERO:
        return debit
    credit = abs(_analytics_amount(trade.net_credit))
    if credit > _ZERO:
        return credit
    return Decimal("1")


def analytics_holding_days(opened_at: date | datetime | str | None, closed_at: date | datetime | str | None) -> int:
    """Return whole days held, floored at zero.

    Missing or unparseable dates yield 0 instead of raising.

    Args:
        opened_at: Open date.
        closed_at: Close date.

    Returns:
        int: Holding period rounded to the nearest whole day.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    start = _analytics_coerce_datetime(opened_at)
    end = _analytics_coerce_datetime(closed_at)
    if start is None or end is None:
        return 0

    try:
        elapsed_seconds = Decimal(str((end - start).total_seconds()))
    except TypeError:
        return 0

    elapsed_days = max(_ZERO, elapsed_seconds / _SECONDS_PER_DAY)
    return int(elapsed_days.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def analytics_holding_bucket(days: int) -> str:
    """Map a holding period in days to its bucket label."""

    if days <= 3:
        return "0-3d"
    if days <= 7:
        return "4-7d"
    if days <= 30:
        return "8-30d"
    return "31d+"


def analytics_compute_snapshot(
    trades: Sequence[TradeRecord],
    generated_at: datetime | None = None,
) -> AnalyticsSnapshot:
    """Compute portfolio analytics from one user's full trade history.

    Only trades with a close date contribute. Totals and the strategy
    breakdown are order independent; the equity curve follows close date
    order (open date when the close date is absent), ties keeping input order.

    Args:
        trades: User trade history in any order.
        generated_at: Computation timestamp, defaults to current UTC time.

    Returns:
        AnalyticsSnapshot: Freshly computed snapshot.

    Raises:
        RuntimeError: This function does not raise runtime errors.
    """

    closed_trades = [trade for trade in trades if trade.closed_at is not None]

    win_count = 0
    loss_count = 0
    pnl_sum = _ZERO
    pnl_pct_sum = _ZERO
    hold_days_sum = 0
    win_pnl_sum = _ZERO
    loss_pnl_sum = _ZERO
    strategy_totals: dict[str, _StrategyAccumulator] = {}
    bucket_counts = dict.fromkeys(HOLDING_PERIOD_BUCKETS, 0)

    for trade in closed_trades:
        pnl = analytics_trade_pnl(trade)
        hold_days = analytics_holding_days(trade.opened_at, trade.closed_at or trade.opened_at)
        bucket_counts[analytics_holding_bucket(hold_days)] += 1

        pnl_sum += pnl
        pnl_pct_sum += pnl / analytics_trade_basis(trade) * _ONE_HUNDRED
        hold_days_sum += hold_days

        strategy_accumulator = strategy_totals.setdefault(
            analytics_classify_strategy(trade.legs),
            _StrategyAccumulator(),
        )
        strategy_accumulator.total += 1
        strategy_accumulator.pnl_sum += pnl

        if pnl > _ZERO:
            win_count += 1
            win_pnl_sum += pnl
            strategy_accumulator.wins += 1
        elif pnl < _ZERO:
            loss_count += 1
            loss_pnl_sum += abs(pnl)
            strategy_accumulator.losses += 1

    closed_count = len(closed_trades)
    if closed_count:
        win_fraction = Decimal(win_count) / Decimal(closed_count)
        average_pnl = pnl_sum / closed_count
        average_pnl_pct = pnl_pct_sum / closed_count
        average_hold_days = Decimal(hold_days_sum) / Decimal(closed_count)
    else:
        win_fraction = average_pnl = average_pnl_pct = average_hold_days = _ZERO

    average_win = win_pnl_sum / win_count if win_count else _ZERO
    average_loss = loss_pnl_sum / loss_count if loss_count else _ZERO
    expectancy = average_win * win_fraction - average_loss * (Decimal("1") - win_fraction)

    strategy_breakdown = sorted(
        (
            StrategyMetric(
                strategy=strategy,
                total=accumulator.total,
                wins=accumulator.wins,
                losses=accumulator.losses,
                average_pnl=analytics_round_amount(accumulator.pnl_sum / accumulator.total),
            )
            for strategy, accumulator in strategy_totals.items()
        ),
        key=lambda metric: -metric.total,
    )

    return AnalyticsSnapshot(
        generated_at=generated_at or datetime.now(timezone.utc),
        totals=AnalyticsTotals(
            win_rate=analytics_round_amount(win_fraction * _ONE_HUNDRED),
            average_pnl=analytics_round_amount(average_pnl),
            average_pnl_pct=analytics_round_amount(average_pnl_pct),
            expectancy=analytics_round_amount(expectancy),
            average_hold_days=analytics_round_amount(average_hold_days),
            closed_trades=closed_count,
        ),
        strategy_breakdown=tuple(strategy_breakdown),
        equity_curve=_analytics_build_equity_curve(closed_trades),
        holding_periods=tuple(HoldingBucket(bucket=bucket, count=bucket_counts[bucket]) for bucket in HOLDING_PERIOD_BUCKETS),
    )


def _analytics_build_equity_curve(closed_trades: list[TradeRecord]) -> tuple[EquityPoint, ...]:
    """Build cumulative PnL points in close-date order."""

    ordered_trades = sorted(closed_trades, key=lambda trade: trade.closed_at or trade.opened_at)

    cumulative_pnl = _ZERO
    equity_curve: list[EquityPoint] = []
    for trade in ordered_trades:
        cumulative_pnl += analytics_trade_pnl(trade)
        equity_curve.append(
            EquityPoint(
                date=trade.closed_at or trade.opened_at,
                cumulative_pnl=analytics_round_amount(cumulative_pnl),
            )
        )
    return tuple(equity_curve)


def _analytics_amount(value: Decimal | int | float | str | None) -> Decimal:
    """Convert an optional money field to Decimal, None as zero."""

    if value is None:
        return _ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _analytics_coerce_datetime(value: date | datetime | str | None) -> datetime | None:
    """Coerce a date-like value to datetime, None when unparseable."""

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


__all__ = [
    "analytics_compute_snapshot",
    "analytics_holding_bucket",
    "analytics_holding_days",
    "analytics_round_amount",
    "analytics_trade_basis",
    "analytics_trade_pnl",
]
