"""Trade journal domain records shared across db, analytics and API layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

TRADE_STATUSES = ("open", "closed", "rolled")
TRADE_SIDES = ("credit", "debit")
OPTION_LEG_TYPES = ("call", "put")
OPTION_LEG_POSITIONS = ("long", "short")


@dataclass(frozen=True)
class OptionLegRecord:
    """One option contract composing part of a trade.

    Attributes:
        leg_id: Unique leg identifier.
        leg_type: Option type (`call` or `put`).
        position: Position direction (`long` or `short`).
        strike: Strike price.
        expiry: Contract expiry date.
        quantity: Positive contract count.
        price: Optional per-contract premium.
    """

    leg_id: UUID
    leg_type: str
    position: str
    strike: Decimal
    expiry: date
    quantity: int
    price: Decimal | None


@dataclass(frozen=True)
class TradeRecord:
    """Persisted trade with its ordered option legs.

    A trade is treated as closed by analytics only when `closed_at` is set;
    `status` is user-maintained and not reconciled with it.

    Attributes:
        trade_id: Unique trade identifier.
        user_id: Owning user identifier.
        symbol: Underlying ticker symbol.
        strategy: Optional user-entered strategy name.
        status: Lifecycle status (`open`, `closed`, `rolled`).
        opened_at: Date the trade was opened.
        closed_at: Optional date the trade was closed.
        net_credit: Optional net premium received.
        net_debit: Optional net premium paid.
        notes: Optional free-text notes.
        legs: Option legs in insertion order.
        created_at_utc: Row creation timestamp in UTC.
        updated_at_utc: Row update timestamp in UTC.
    """

    trade_id: UUID
    user_id: UUID
    symbol: str
    strategy: str | None
    status: str
    opened_at: date
    closed_at: date | None
    net_credit: Decimal | None
    net_debit: Decimal | None
    notes: str | None
    legs: tuple[OptionLegRecord, ...]
    created_at_utc: datetime
    updated_at_utc: datetime


__all__ = [
    "OPTION_LEG_POSITIONS",
    "OPTION_LEG_TYPES",
    "TRADE_SIDES",
    "TRADE_STATUSES",
    "OptionLegRecord",
    "TradeRecord",
]
