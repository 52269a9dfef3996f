"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Protocol
from uuid import UUID

from app.domain import AnalyticsSnapshot, HealthStatus, TradeRecord


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


@dataclass(frozen=True)
class OptionLegCreateRequest:
    """Input payload for one option leg insert.

    Attributes:
        leg_type: Option type (`call` or `put`).
        position: Position direction (`long` or `short`).
        strike: Strike price.
        expiry: Contract expiry date.
        quantity: Positive contract count.
        price: Optional per-contract premium.
    """

    leg_type: str
    position: str
    strike: Decimal
    expiry: date
    quantity: int
    price: Decimal | None = None


@dataclass(frozen=True)
class TradeCreateRequest:
    """Input payload for one trade insert with its legs.

    Attributes:
        user_id: Owning user identifier.
        symbol: Underlying ticker symbol.
        side: Net premium direction (`credit` or `debit`).
        premium: Net premium amount stored on the matching side.
        legs: Option legs in insertion order.
        strategy: Optional user-entered strategy name.
        status: Lifecycle status (`open`, `closed`, `rolled`).
        opened_at: Date the trade was opened.
        closed_at: Optional date the trade was closed.
        notes: Optional free-text notes.
    """

    user_id: UUID
    symbol: str
    side: str
    premium: Decimal
    legs: tuple[OptionLegCreateRequest, ...]
    opened_at: date
    strategy: str | None = None
    status: str = "open"
    closed_at: date | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TradeUpdateRequest:
    """Partial update contract for one trade.

    Fields left as None keep their stored value. Nullable columns listed in
    `cleared_fields` are written as null instead.

    Attributes:
        symbol: New underlying ticker symbol.
        side: New net premium direction; the premium moves to the matching column.
        premium: New net premium amount, stored on the effective side.
        legs: Replacement option legs; when set, every stored leg is replaced.
        strategy: New user-entered strategy name.
        status: New lifecycle status.
        opened_at: New open date.
        closed_at: New close date.
        notes: New free-text notes.
        cleared_fields: Names among `strategy`, `closed_at`, `notes` to set to null.
    """

    symbol: str | None = None
    side: str | None = None
    premium: Decimal | None = None
    legs: tuple[OptionLegCreateRequest, ...] | None = None
    strategy: str | None = None
    status: str | None = None
    opened_at: date | None = None
    closed_at: date | None = None
    notes: str | None = None
    cleared_fields: frozenset[str] = frozenset()


@dataclass(frozen=True)
class StoredAnalyticsSnapshotRecord:
    """Persistence model for one cached analytics snapshot row.

    Attributes:
        user_id: Owning user identifier.
        label: Snapshot label.
        report_date: Report date the snapshot is keyed under.
        calculated_at: Timestamp of the last write for this key.
        snapshot: Stored analytics snapshot.
    """

    user_id: UUID
    label: str
    report_date: date
    calculated_at: datetime
    snapshot: AnalyticsSnapshot


class TradeRepositoryPort(Protocol):
    """Port definition for trade journal persistence and reads."""

    def db_trade_list_for_user(self, user_id: UUID) -> list[TradeRecord]:
        """List all trades for one user with their legs.

        Args:
            user_id: Owning user identifier.

        Returns:
            list[TradeRecord]: Trades ordered by latest opened date first.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_user_id_list(self) -> list[UUID]:
        """List every known user identifier.

        Returns:
            list[UUID]: User identifiers in creation order.

        Raises:
            RuntimeError: Raised when database read fails.
        """


class TradeWriteRepositoryPort(TradeRepositoryPort, Protocol):
    """Port definition for trade journal writes used by API surfaces."""

    def db_trade_get(self, user_id: UUID, trade_id: UUID) -> TradeRecord | None:
        """Fetch one trade owned by the user.

        Args:
            user_id: Owning user identifier.
            trade_id: Trade identifier.

        Returns:
            TradeRecord | None: Matching trade, or None when absent.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_trade_create(self, request: TradeCreateRequest) -> TradeRecord:
        """Insert one trade and its legs in a single transaction.

        Args:
            request: Trade create request.

        Returns:
            TradeRecord: Persisted trade.

        Raises:
            ValueError: Raised when request values are invalid.
            RuntimeError: Raised when persistence fails.
        """

    def db_trade_close(self, user_id: UUID, trade_id: UUID, closed_at: date, status: str = "closed") -> TradeRecord | None:
        """Set the close date and status of one trade.

        Args:
            user_id: Owning user identifier.
            trade_id: Trade identifier.
            closed_at: Close date.
            status: Lifecycle status written alongside the close date.

        Returns:
            TradeRecord | None: Updated trade, or None when absent.

        Raises:
            ValueError: Raised when status is invalid.
            RuntimeError: Raised when persistence fails.
        """

    def db_trade_update(self, user_id: UUID, trade_id: UUID, request: TradeUpdateRequest) -> TradeRecord | None:
        """Apply a partial update to one trade in a single transaction.

        Args:
            user_id: Owning user identifier.
            trade_id: Trade identifier.
            request: Partial update request.

        Returns:
            TradeRecord | None: Updated trade, or None when absent.

        Raises:
            ValueError: Raised when the request is empty or values are invalid.
            RuntimeError: Raised when persistence fails.
        """

    def db_trade_delete(self, user_id: UUID, trade_id: UUID) -> bool:
        """Delete one trade and, by cascade, its legs.

        Args:
            user_id: Owning user identifier.
            trade_id: Trade identifier.

        Returns:
            bool: Whether a row was deleted.

        Raises:
            RuntimeError: Raised when persistence fails.
        """


class AnalyticsSnapshotRepositoryPort(Protocol):
    """Port definition for cached analytics snapshot persistence."""

    def db_analytics_snapshot_get_latest(self, user_id: UUID, label: str) -> StoredAnalyticsSnapshotRecord | None:
        """Fetch the latest stored snapshot for one user and label.

        Args:
            user_id: Owning user identifier.
            label: Snapshot label.

        Returns:
            StoredAnalyticsSnapshotRecord | None: Latest row, or None when absent.

        Raises:
            RuntimeError: Raised when database read fails.
        """

    def db_analytics_snapshot_upsert(
        self,
        user_id: UUID,
        snapshot: AnalyticsSnapshot,
        label: str,
        report_date: date,
        calculated_at: datetime,
    ) -> StoredAnalyticsSnapshotRecord:
        """Insert or overwrite the snapshot stored under (user, label, report date).

        Args:
            user_id: Owning user identifier.
            snapshot: Snapshot to store.
            label: Snapshot label.
            report_date: Report date key.
            calculated_at: Calculation timestamp written with the row.

        Returns:
            StoredAnalyticsSnapshotRecord: Row as persisted.

        Raises:
            ValueError: Raised when input values are invalid.
            RuntimeError: Raised when persistence fails.
        """
