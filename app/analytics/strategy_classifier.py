"""Structural strategy archetype classification for option trades."""

from __future__ import annotations

from collections.abc import Sequence

from app.domain import OptionLegRecord

STRATEGY_SINGLE = "single"
STRATEGY_VERTICAL_SPREAD = "verticalSpread"
STRATEGY_IRON_CONDOR = "ironCondor"
STRATEGY_OTHER = "other"

STRATEGY_ARCHETYPES = (STRATEGY_SINGLE, STRATEGY_VERTICAL_SPREAD, STRATEGY_IRON_CONDOR, STRATEGY_OTHER)


def analytics_classify_strategy(legs: Sequence[OptionLegRecord]) -> str:
    """Classify a trade's leg set into one strategy archetype.

    Two legs count as a vertical spread when they share expiry and option
    type; position direction is not compared, so two long calls at different
    strikes also classify as a vertical spread.

    Args:
        legs: Trade legs in insertion order.

    Returns:
        str: One of `single`, `verticalSpread`, `ironCondor`, `other`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    leg_count = len(legs)

    if leg_count == 1:
        return STRATEGY_SINGLE

    if leg_count == 2:
        first_leg, second_leg = legs
        if first_leg.expiry == second_leg.expiry and first_leg.leg_type == second_leg.leg_type:
            return STRATEGY_VERTICAL_SPREAD
        return STRATEGY_OTHER

    if leg_count == 4:
        expiries = {leg.expiry for leg in legs}
        positions = {leg.position for leg in legs}
        leg_types = {leg.leg_type for leg in legs}
        has_long_and_short = "long" in positions and "short" in positions
        has_call_and_put = "call" in leg_types and "put" in leg_types
        if len(expiries) == 1 and has_long_and_short and has_call_and_put:
            return STRATEGY_IRON_CONDOR

    return STRATEGY_OTHER


__all__ = [
    "STRATEGY_ARCHETYPES",
    "STRATEGY_IRON_CONDOR",
    "STRATEGY_OTHER",
    "STRATEGY_SINGLE",
    "STRATEGY_VERTICAL_SPREAD",
    "analytics_classify_strategy",
]
