"""Tests for portfolio metric aggregation over trade history."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from app.analytics import (
    analytics_compute_snapshot,
    analytics_holding_bucket,
    analytics_holding_days,
    analytics_round_amount,
    analytics_trade_basis,
)
from app.domain import HOLDING_PERIOD_BUCKETS, OptionLegRecord, TradeRecord

_GENERATED_AT = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _build_leg(leg_type: str = "put", position: str = "short", strike: str = "100") -> OptionLegRecord:
    """Build one option leg expiring on a fixed date.

    Returns:
        OptionLegRecord: Typed leg record.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return OptionLegRecord(
        leg_id=uuid4(),
        leg_type=leg_type,
        position=position,
        strike=Decimal(strike),
        expiry=date(2024, 3, 15),
        quantity=1,
        price=None,
    )


def _build_trade(
    opened_at: date,
    closed_at: date | None,
    net_credit: str | None = None,
    net_debit: str | None = None,
    legs: tuple[OptionLegRecord, ...] | None = None,
) -> TradeRecord:
    """Build one trade record with overridable analytics inputs.

    Returns:
        TradeRecord: Typed trade record.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return TradeRecord(
        trade_id=uuid4(),
        user_id=uuid4(),
        symbol="SPY",
        strategy=None,
        status="closed" if closed_at is not None else "open",
        opened_at=opened_at,
        closed_at=closed_at,
        net_credit=Decimal(net_credit) if net_credit is not None else None,
        net_debit=Decimal(net_debit) if net_debit is not None else None,
        notes=None,
        legs=legs if legs is not None else (_build_leg(),),
        created_at_utc=_GENERATED_AT,
        updated_at_utc=_GENERATED_AT,
    )


def test_metrics_single_closed_credit_trade_matches_worked_example() -> None:
    """Compute totals for one closed short put held nine days.

    Returns:
        None: Assertions validate snapshot values.

    Raises:
        AssertionError: Raised when computed values differ.
    """

    trade = _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 10), net_credit="250")

    snapshot = analytics_compute_snapshot([trade], generated_at=_GENERATED_AT)

    assert snapshot.generated_at == _GENERATED_AT
    assert snapshot.totals.closed_trades == 1
    assert snapshot.totals.win_rate == Decimal("100.00")
    assert snapshot.totals.average_pnl == Decimal("250.00")
    assert snapshot.totals.average_pnl_pct == Decimal("100.00")
    assert snapshot.totals.expectancy == Decimal("250.00")
    assert snapshot.totals.average_hold_days == Decimal("9.00")
    assert len(snapshot.strategy_breakdown) == 1
    assert snapshot.strategy_breakdown[0].strategy == "single"
    assert snapshot.strategy_breakdown[0].total == 1
    assert snapshot.strategy_breakdown[0].wins == 1
    assert snapshot.strategy_breakdown[0].losses == 0
    assert snapshot.strategy_breakdown[0].average_pnl == Decimal("250.00")
    assert {bucket.bucket: bucket.count for bucket in snapshot.holding_periods} == {
        "0-3d": 0,
        "4-7d": 0,
        "8-30d": 1,
        "31d+": 0,
    }


def test_metrics_win_and_loss_same_day_yield_expectancy() -> None:
    """Compute win rate, average and expectancy for one win and one loss.

    Returns:
        None: Assertions validate snapshot totals.

    Raises:
        AssertionError: Raised when computed values differ.
    """

    trades = [
        _build_trade(opened_at=date(2024, 2, 1), closed_at=date(2024, 2, 1), net_credit="100"),
        _build_trade(opened_at=date(2024, 2, 1), closed_at=date(2024, 2, 1), net_debit="40"),
    ]

    snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT)

    assert snapshot.totals.win_rate == Decimal("50.00")
    assert snapshot.totals.average_pnl == Decimal("30.00")
    assert snapshot.totals.expectancy == Decimal("30.00")
    assert snapshot.totals.average_pnl_pct == Decimal("0.00")
    assert snapshot.holding_periods[0].bucket == "0-3d"
    assert snapshot.holding_periods[0].count == 2


def test_metrics_empty_history_yields_zero_snapshot() -> None:
    """Return zero totals and four empty buckets for no closed trades.

    Returns:
        None: Assertions validate empty snapshot shape.

    Raises:
        AssertionError: Raised when empty snapshot is malformed.
    """

    open_trade = _build_trade(opened_at=date(2024, 2, 1), closed_at=None, net_credit="90")

    for trades in ([], [open_trade]):
        snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT)

        assert snapshot.totals.closed_trades == 0
        assert snapshot.totals.win_rate == Decimal("0.00")
        assert snapshot.totals.average_pnl == Decimal("0.00")
        assert snapshot.totals.average_pnl_pct == Decimal("0.00")
        assert snapshot.totals.expectancy == Decimal("0.00")
        assert snapshot.totals.average_hold_days == Decimal("0.00")
        assert snapshot.strategy_breakdown == ()
        assert snapshot.equity_curve == ()
        assert tuple(bucket.bucket for bucket in snapshot.holding_periods) == HOLDING_PERIOD_BUCKETS
        assert all(bucket.count == 0 for bucket in snapshot.holding_periods)


def test_metrics_zero_pnl_trade_is_neither_win_nor_loss() -> None:
    """Count a break-even trade as closed but not as win or loss.

    Returns:
        None: Assertions validate win/loss counting.

    Raises:
        AssertionError: Raised when break-even trade is miscounted.
    """

    trades = [
        _build_trade(opened_at=date(2024, 2, 1), closed_at=date(2024, 2, 3), net_credit="50", net_debit="50"),
        _build_trade(opened_at=date(2024, 2, 1), closed_at=date(2024, 2, 3)),
    ]

    snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT)

    assert snapshot.totals.closed_trades == 2
    assert snapshot.totals.win_rate == Decimal("0.00")
    assert snapshot.totals.expectancy == Decimal("0.00")
    assert snapshot.strategy_breakdown[0].wins == 0
    assert snapshot.strategy_breakdown[0].losses == 0


def test_metrics_equity_curve_follows_close_date_and_keeps_tie_order() -> None:
    """Accumulate PnL in close-date order with ties kept in input order.

    Returns:
        None: Assertions validate equity curve points.

    Raises:
        AssertionError: Raised when curve order or values differ.
    """

    trades = [
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 5), net_credit="50"),
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 2), net_debit="20"),
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 5), net_credit="10"),
    ]

    snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT)

    assert [(point.date, point.cumulative_pnl) for point in snapshot.equity_curve] == [
        (date(2024, 1, 2), Decimal("-20.00")),
        (date(2024, 1, 5), Decimal("30.00")),
        (date(2024, 1, 5), Decimal("40.00")),
    ]


def test_metrics_totals_and_buckets_sum_to_closed_count() -> None:
    """Keep breakdown totals, bucket counts and final equity consistent.

    Returns:
        None: Assertions validate aggregate invariants.

    Raises:
        AssertionError: Raised when sums are inconsistent.
    """

    vertical_legs = (_build_leg(leg_type="call", position="long"), _build_leg(leg_type="call", strike="105"))
    trades = [
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 2), net_credit="120"),
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 6), net_debit="35.5", legs=vertical_legs),
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 3, 1), net_credit="80", legs=vertical_legs),
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 20), net_credit="10", net_debit="25"),
        _build_trade(opened_at=date(2024, 1, 1), closed_at=None, net_credit="999"),
    ]

    snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT)

    assert snapshot.totals.closed_trades == 4
    assert sum(metric.total for metric in snapshot.strategy_breakdown) == 4
    assert sum(bucket.count for bucket in snapshot.holding_periods) == 4
    assert snapshot.equity_curve[-1].cumulative_pnl == Decimal("149.50")
    assert Decimal("0") <= snapshot.totals.win_rate <= Decimal("100")
    assert [metric.strategy for metric in snapshot.strategy_breakdown] == ["single", "verticalSpread"]


def test_metrics_breakdown_ties_keep_first_seen_order() -> None:
    """Order equal-count archetypes by first appearance.

    Returns:
        None: Assertions validate breakdown order.

    Raises:
        AssertionError: Raised when tie order differs.
    """

    other_legs = (_build_leg(), _build_leg(leg_type="call"), _build_leg(strike="90"))
    trades = [
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 2), net_credit="5", legs=other_legs),
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 2), net_credit="5"),
    ]

    snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT)

    assert [metric.strategy for metric in snapshot.strategy_breakdown] == ["other", "single"]


def test_metrics_recompute_is_idempotent_apart_from_generated_at() -> None:
    """Produce equal content for repeated computation on unchanged history.

    Returns:
        None: Assertions validate idempotence.

    Raises:
        AssertionError: Raised when repeated results differ.
    """

    trades = [
        _build_trade(opened_at=date(2024, 1, 1), closed_at=date(2024, 1, 9), net_credit="33.33"),
        _build_trade(opened_at=date(2024, 1, 3), closed_at=date(2024, 1, 4), net_debit="12.5"),
    ]

    first_snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT)
    second_snapshot = analytics_compute_snapshot(trades, generated_at=_GENERATED_AT + timedelta(minutes=5))

    assert first_snapshot.totals == second_snapshot.totals
    assert first_snapshot.strategy_breakdown == second_snapshot.strategy_breakdown
    assert first_snapshot.equity_curve == second_snapshot.equity_curve
    assert first_snapshot.holding_periods == second_snapshot.holding_periods


@pytest.mark.parametrize(
    ("raw_value", "expected_value"),
    [
        (Decimal("0.125"), Decimal("0.13")),
        (Decimal("0.124"), Decimal("0.12")),
        (Decimal("-0.125"), Decimal("-0.13")),
        (Decimal("33.3333"), Decimal("33.33")),
    ],
)
def test_metrics_round_amount_uses_half_up(raw_value: Decimal, expected_value: Decimal) -> None:
    """Round to two places with ties away from zero.

    Returns:
        None: Assertions validate rounding.

    Raises:
        AssertionError: Raised when rounding differs.
    """

    assert analytics_round_amount(raw_value) == expected_value


def test_metrics_round_amount_never_returns_negative_zero() -> None:
    """Normalize tiny negative values to positive zero.

    Returns:
        None: Assertions validate zero rendering.

    Raises:
        AssertionError: Raised when negative zero leaks.
    """

    assert str(analytics_round_amount(Decimal("-0.001"))) == "0.00"


def test_metrics_trade_basis_prefers_debit_then_credit_then_one() -> None:
    """Resolve percentage basis from debit, then credit, then one.

    Returns:
        None: Assertions validate basis selection.

    Raises:
        AssertionError: Raised when basis differs.
    """

    assert analytics_trade_basis(_build_trade(date(2024, 1, 1), None, net_credit="80", net_debit="20")) == Decimal("20")
    assert analytics_trade_basis(_build_trade(date(2024, 1, 1), None, net_credit="80")) == Decimal("80")
    assert analytics_trade_basis(_build_trade(date(2024, 1, 1), None, net_credit="0", net_debit="0")) == Decimal("1")


@pytest.mark.parametrize(
    ("opened_at", "closed_at", "expected_days"),
    [
        (date(2024, 1, 1), date(2024, 1, 10), 9),
        (date(2024, 1, 10), date(2024, 1, 1), 0),
        (datetime(2024, 1, 1, 0, 0), datetime(2024, 1, 1, 12, 0), 1),
        (datetime(2024, 1, 1, 0, 0), datetime(2024, 1, 1, 11, 59), 0),
        ("2024-01-01", "2024-02-01", 31),
        ("not-a-date", date(2024, 1, 10), 0),
        (None, date(2024, 1, 10), 0),
        (datetime(2024, 1, 1, tzinfo=timezone.utc), datetime(2024, 1, 3), 0),
    ],
)
def test_metrics_holding_days_never_raises(opened_at, closed_at, expected_days: int) -> None:
    """Return rounded non-negative day counts, zero on unusable input.

    Returns:
        None: Assertions validate holding days.

    Raises:
        AssertionError: Raised when day count differs.
    """

    assert analytics_holding_days(opened_at, closed_at) == expected_days


@pytest.mark.parametrize(
    ("days", "expected_bucket"),
    [(0, "0-3d"), (3, "0-3d"), (4, "4-7d"), (7, "4-7d"), (8, "8-30d"), (30, "8-30d"), (31, "31d+")],
)
def test_metrics_holding_bucket_boundaries(days: int, expected_bucket: str) -> None:
    """Map bucket boundary days to their inclusive upper bucket.

    Returns:
        None: Assertions validate bucket mapping.

    Raises:
        AssertionError: Raised when bucket differs.
    """

    assert analytics_holding_bucket(days) == expected_bucket
