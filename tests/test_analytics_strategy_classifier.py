"""Tests for structural strategy archetype classification."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from app.analytics import (
    STRATEGY_ARCHETYPES,
    STRATEGY_IRON_CONDOR,
    STRATEGY_OTHER,
    STRATEGY_SINGLE,
    STRATEGY_VERTICAL_SPREAD,
    analytics_classify_strategy,
)
from app.domain import OptionLegRecord


def _build_leg(
    leg_type: str = "call",
    position: str = "long",
    strike: str = "100",
    expiry: date = date(2024, 3, 15),
) -> OptionLegRecord:
    """Build one option leg with overridable structural fields.

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
        expiry=expiry,
        quantity=1,
        price=None,
    )


def test_classifier_single_leg_is_single() -> None:
    """Classify any one-leg trade as single.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    assert analytics_classify_strategy([_build_leg(leg_type="put", position="short")]) == STRATEGY_SINGLE


def test_classifier_two_legs_same_expiry_and_type_is_vertical_spread() -> None:
    """Classify two same-type same-expiry legs as vertical spread.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    legs = [_build_leg(position="long", strike="100"), _build_leg(position="short", strike="105")]

    assert analytics_classify_strategy(legs) == STRATEGY_VERTICAL_SPREAD


def test_classifier_two_legs_ignore_position_direction() -> None:
    """Keep vertical spread classification for two long legs.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    legs = [_build_leg(position="long", strike="100"), _build_leg(position="long", strike="110")]

    assert analytics_classify_strategy(legs) == STRATEGY_VERTICAL_SPREAD


@pytest.mark.parametrize(
    "second_leg",
    [
        _build_leg(leg_type="put"),
        _build_leg(expiry=date(2024, 4, 19)),
    ],
)
def test_classifier_two_legs_mismatched_structure_is_other(second_leg: OptionLegRecord) -> None:
    """Classify two legs with different type or expiry as other.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    assert analytics_classify_strategy([_build_leg(), second_leg]) == STRATEGY_OTHER


def test_classifier_four_legs_mixed_is_iron_condor() -> None:
    """Classify a four-leg same-expiry long/short call/put mix as iron condor.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    legs = [
        _build_leg(leg_type="put", position="long", strike="90"),
        _build_leg(leg_type="put", position="short", strike="95"),
        _build_leg(leg_type="call", position="short", strike="105"),
        _build_leg(leg_type="call", position="long", strike="110"),
    ]

    assert analytics_classify_strategy(legs) == STRATEGY_IRON_CONDOR


def test_classifier_four_long_legs_is_other() -> None:
    """Classify four same-expiry legs without a short leg as other.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    legs = [
        _build_leg(leg_type="put", position="long", strike="90"),
        _build_leg(leg_type="put", position="long", strike="95"),
        _build_leg(leg_type="call", position="long", strike="105"),
        _build_leg(leg_type="call", position="long", strike="110"),
    ]

    assert analytics_classify_strategy(legs) == STRATEGY_OTHER


def test_classifier_four_legs_split_expiry_is_other() -> None:
    """Classify four mixed legs across two expiries as other.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    legs = [
        _build_leg(leg_type="put", position="long", strike="90"),
        _build_leg(leg_type="put", position="short", strike="95"),
        _build_leg(leg_type="call", position="short", strike="105", expiry=date(2024, 4, 19)),
        _build_leg(leg_type="call", position="long", strike="110", expiry=date(2024, 4, 19)),
    ]

    assert analytics_classify_strategy(legs) == STRATEGY_OTHER


@pytest.mark.parametrize("leg_count", [0, 3, 5])
def test_classifier_other_leg_counts_are_other(leg_count: int) -> None:
    """Classify leg counts outside 1, 2 and 4 as other.

    Returns:
        None: Assertions validate classification.

    Raises:
        AssertionError: Raised when archetype differs.
    """

    legs = [_build_leg(strike=str(100 + index)) for index in range(leg_count)]

    assert analytics_classify_strategy(legs) == STRATEGY_OTHER


def test_classifier_is_deterministic_and_closed_over_archetypes() -> None:
    """Return the same archetype for the same legs, always from the known set.

    Returns:
        None: Assertions validate determinism.

    Raises:
        AssertionError: Raised when results differ between calls.
    """

    legs = (_build_leg(), _build_leg(position="short", strike="120"))

    first_result = analytics_classify_strategy(legs)
    second_result = analytics_classify_strategy(legs)

    assert first_result == second_result
    assert first_result in STRATEGY_ARCHETYPES


def test_classifier_returns_camel_case_archetype_tags() -> None:
    """Return the exact tag strings stored in snapshot payloads.

    Returns:
        None: Assertions validate tag spelling.

    Raises:
        AssertionError: Raised when tag strings differ.
    """

    vertical_legs = [_build_leg(position="long", strike="100"), _build_leg(position="short", strike="105")]
    condor_legs = [
        _build_leg(leg_type="put", position="long", strike="90"),
        _build_leg(leg_type="put", position="short", strike="95"),
        _build_leg(leg_type="call", position="short", strike="105"),
        _build_leg(leg_type="call", position="long", strike="110"),
    ]

    assert analytics_classify_strategy(vertical_legs) == "verticalSpread"
    assert analytics_classify_strategy(condor_legs) == "ironCondor"
    assert STRATEGY_ARCHETYPES == ("single", "verticalSpread", "ironCondor", "other")
