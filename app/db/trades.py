"""Database service for trade journal persistence and history reads."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from sqlalchemy import Connection, Engine, text
from sqlalchemy.exc import SQLAlchemyError

from app.domain import (
    OPTION_LEG_POSITIONS,
    OPTION_LEG_TYPES,
    TRADE_SIDES,
    TRADE_STATUSES,
    OptionLegRecord,
    TradeRecord,
)

from .interfaces import OptionLegCreateRequest, TradeCreateRequest, TradeUpdateRequest, TradeWriteRepositoryPort


class SQLAlchemyTradeRepositoryService(TradeWriteRepositoryPort):
    """SQLAlchemy implementation for trade and option-leg DB operations."""

    _TRADE_SELECT = (
        "SELECT "
        "t.trade_id, t.user_id, t.symbol, t.strategy, t.status, t.opened_at, t.closed_at, "
        "t.net_credit, t.net_debit, t.notes, t.created_at_utc, t.updated_at_utc, "
        "COALESCE("
        "json_agg("
        "json_build_object("
        "'option_leg_id', l.option_leg_id::text, "
        "'leg_type', l.leg_type, "
        "'position', l.position, "
        "'strike', l.strike::text, "
        "'expiry', to_char(l.expiry, 'YYYY-MM-DD'), "
        "'quantity', l.quantity, "
        "'price', l.price::text"
        ") ORDER BY l.leg_index asc"
        ") FILTER (WHERE l.option_leg_id IS NOT NULL), "
        "'[]'"
        ") AS legs "
        "FROM trade t "
        "LEFT JOIN option_leg l ON l.trade_id = t.trade_id "
    )

    _TRADE_LIST_QUERY = (
        _TRADE_SELECT
        + "WHERE t.user_id = CAST(:user_id AS uuid) "
        + "GROUP BY t.trade_id "
        + "ORDER BY t.opened_at desc, t.created_at_utc desc"
    )

    _TRADE_GET_QUERY = (
        _TRADE_SELECT
        + "WHERE t.user_id = CAST(:user_id AS uuid) AND t.trade_id = CAST(:trade_id AS uuid) "
        + "GROUP BY t.trade_id"
    )

    _LEG_INSERT = (
        "INSERT INTO option_leg ("
        "trade_id, leg_index, leg_type, position, strike, expiry, quantity, price"
        ") VALUES ("
        "CAST(:trade_id AS uuid), :leg_index, :leg_type, :position, CAST(:strike AS numeric), "
        "CAST(:expiry AS date), :quantity, CAST(:price AS numeric)"
        ")"
    )

    _CLEARABLE_FIELDS = ("strategy", "closed_at", "notes")

    def __init__(self, engine: Engine):
        """Initialize trade database service.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when engine is invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_trade_list_for_user(self, user_id: UUID) -> list[TradeRecord]:
        """List all trades for one user with their legs.

        Args:
            user_id: Owning user identifier.

        Returns:
            list[TradeRecord]: Trades ordered by latest opened date first.

        Raises:
            ValueError: Raised when user_id is invalid.
            RuntimeError: Raised when database read fails.
        """

        normalized_user_id = self._db_trade_validate_uuid(user_id, "user_id")

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(self._TRADE_LIST_QUERY),
                    {"user_id": normalized_user_id},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("trade list read failed") from error

        return [self._db_trade_map_row(row) for row in rows]

    def db_user_id_list(self) -> list[UUID]:
        """List every known user identifier.

        Returns:
            list[UUID]: User identifiers in creation order.

        Raises:
            RuntimeError: Raised when database read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text("SELECT user_id FROM app_user ORDER BY created_at_utc asc, user_id asc"),
                    {},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("user list read failed") from error

        return [UUID(str(row["user_id"])) for row in rows]

    def db_trade_get(self, user_id: UUID, trade_id: UUID) -> TradeRecord | None:
        """Fetch one trade owned by the user.

        Args:
            user_id: Owning user identifier.
            trade_id: Trade identifier.

        Returns:
            TradeRecord | None: Matching trade, or None when absent.

        Raises:
            ValueError: Raised when identifiers are invalid.
            RuntimeError: Raised when database read fails.
        """

        parameters = {
            "user_id": self._db_trade_validate_uuid(user_id, "user_id"),
            "trade_id": self._db_trade_validate_uuid(trade_id, "trade_id"),
        }

        try:
            with self._engine.connect() as connection:
                return self._db_trade_fetch(connection, parameters)
        except SQLAlchemyError as error:
            raise RuntimeError("trade read failed") from error

    def db_trade_create(self, request: TradeCreateRequest) -> TradeRecord:
        """Insert one trade and its legs in a single transaction.

        The premium is stored as net credit or net debit according to `side`,
        leaving the other column null.

        Args:
            request: Trade create request.

        Returns:
            TradeRecord: Persisted trade.

        Raises:
            ValueError: Raised when request values are invalid.
            RuntimeError: Raised when persistence fails.
        """

        trade_parameters = self._db_trade_validate_create_request(request)
        leg_parameters = [self._db_trade_validate_leg_request(leg) for leg in request.legs]

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(
                        "INSERT INTO app_user (user_id) VALUES (CAST(:user_id AS uuid)) "
                        "ON CONFLICT (user_id) DO NOTHING"
                    ),
                    {"user_id": trade_parameters["user_id"]},
                )
                inserted_row = connection.execute(
                    text(
                        "INSERT INTO trade ("
                        "user_id, symbol, strategy, status, opened_at, closed_at, net_credit, net_debit, notes"
                        ") VALUES ("
                        "CAST(:user_id AS uuid), :symbol, :strategy, :status, CAST(:opened_at AS date), "
                        "CAST(:closed_at AS date), CAST(:net_credit AS numeric), CAST(:net_debit AS numeric), :notes"
                        ") RETURNING trade_id"
                    ),
                    trade_parameters,
                ).mappings().one()
                trade_id = str(inserted_row["trade_id"])

                self._db_trade_insert_legs(connection, trade_id, leg_parameters)

                created_trade = self._db_trade_fetch(
                    connection,
                    {"user_id": trade_parameters["user_id"], "trade_id": trade_id},
                )
        except SQLAlchemyError as error:
            raise RuntimeError("trade create failed") from error

        if created_trade is None:
            raise RuntimeError("trade create failed: row not readable after insert")
        return created_trade

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
            ValueError: Raised when inputs are invalid.
            RuntimeError: Raised when persistence fails.
        """

        if not isinstance(closed_at, date):
            raise ValueError("closed_at must be a date")
        normalized_status = self._db_trade_validate_choice(status, TRADE_STATUSES, "status")
        parameters = {
            "user_id": self._db_trade_validate_uuid(user_id, "user_id"),
            "trade_id": self._db_trade_validate_uuid(trade_id, "trade_id"),
        }

        try:
            with self._engine.begin() as connection:
                update_result = connection.execute(
                    text(
                        "UPDATE trade SET "
                        "closed_at = CAST(:closed_at AS date), status = :status, updated_at_utc = now() "
                        "WHERE trade_id = CAST(:trade_id AS uuid) AND user_id = CAST(:user_id AS uuid)"
                    ),
                    {**parameters, "closed_at": closed_at.isoformat(), "status": normalized_status},
                )
                if update_result.rowcount == 0:
                    return None
                return self._db_trade_fetch(connection, parameters)
        except SQLAlchemyError as error:
            raise RuntimeError("trade close failed") from error

    def db_trade_update(self, user_id: UUID, trade_id: UUID, request: TradeUpdateRequest) -> TradeRecord | None:
        """Apply a partial update to one trade in a single transaction.

        Unset fields keep their stored values. The stored row is read first so
        that a side change without a premium moves the existing amount to the
        other column. When `legs` is set, every stored leg is deleted and the
        new legs are inserted in order.

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

        if request is None:
            raise ValueError("request must not be None")
        unknown_cleared_fields = set(request.cleared_fields) - set(self._CLEARABLE_FIELDS)
        if unknown_cleared_fields:
            raise ValueError(f"request.cleared_fields may only name: {', '.join(self._CLEARABLE_FIELDS)}")
        provided_values = (
            request.symbol,
            request.side,
            request.premium,
            request.legs,
            request.strategy,
            request.status,
            request.opened_at,
            request.closed_at,
            request.notes,
        )
        if all(value is None for value in provided_values) and not request.cleared_fields:
            raise ValueError("request must change at least one field")
        parameters = {
            "user_id": self._db_trade_validate_uuid(user_id, "user_id"),
            "trade_id": self._db_trade_validate_uuid(trade_id, "trade_id"),
        }
        leg_parameters = (
            None if request.legs is None else [self._db_trade_validate_leg_request(leg) for leg in request.legs]
        )
        if leg_parameters is not None and not leg_parameters:
            raise ValueError("request.legs must not be empty when provided")

        try:
            with self._engine.begin() as connection:
                current_trade = self._db_trade_fetch(connection, parameters)
                if current_trade is None:
                    return None
                trade_parameters = self._db_trade_merge_update_request(current_trade, request)

                connection.execute(
                    text(
                        "UPDATE trade SET "
                        "symbol = :symbol, strategy = :strategy, status = :status, "
                        "opened_at = CAST(:opened_at AS date), closed_at = CAST(:closed_at AS date), "
                        "net_credit = CAST(:net_credit AS numeric), net_debit = CAST(:net_debit AS numeric), "
                        "notes = :notes, updated_at_utc = now() "
                        "WHERE trade_id = CAST(:trade_id AS uuid) AND user_id = CAST(:user_id AS uuid)"
                    ),
                    {**trade_parameters, **parameters},
                )
                if leg_parameters is not None:
                    connection.execute(
                        text("DELETE FROM option_leg WHERE trade_id = CAST(:trade_id AS uuid)"),
                        {"trade_id": parameters["trade_id"]},
                    )
                    self._db_trade_insert_legs(connection, parameters["trade_id"], leg_parameters)

                return self._db_trade_fetch(connection, parameters)
        except SQLAlchemyError as error:
            raise RuntimeError("trade update failed") from error

    def db_trade_delete(self, user_id: UUID, trade_id: UUID) -> bool:
        """Delete one trade and, by cascade, its legs.

        Args:
            user_id: Owning user identifier.
            trade_id: Trade identifier.

        Returns:
            bool: Whether a row was deleted.

        Raises:
            ValueError: Raised when identifiers are invalid.
            RuntimeError: Raised when persistence fails.
        """

        parameters = {
            "user_id": self._db_trade_validate_uuid(user_id, "user_id"),
            "trade_id": self._db_trade_validate_uuid(trade_id, "trade_id"),
        }

        try:
            with self._engine.begin() as connection:
                delete_result = connection.execute(
                    text(
                        "DELETE FROM trade "
                        "WHERE trade_id = CAST(:trade_id AS uuid) AND user_id = CAST(:user_id AS uuid)"
                    ),
                    parameters,
                )
        except SQLAlchemyError as error:
            raise RuntimeError("trade delete failed") from error

        return delete_result.rowcount > 0

    def _db_trade_fetch(self, connection: Connection, parameters: dict[str, str]) -> TradeRecord | None:
        """Read one trade with legs on an open connection.

        Args:
            connection: Open SQLAlchemy connection.
            parameters: Bound `user_id` and `trade_id` values.

        Returns:
            TradeRecord | None: Matching trade, or None when absent.

        Raises:
            SQLAlchemyError: Propagated to the calling public method.
        """

        rows = connection.execute(text(self._TRADE_GET_QUERY), parameters).mappings().all()
        if not rows:
            return None
        return self._db_trade_map_row(rows[0])

    def _db_trade_insert_legs(
        self,
        connection: Connection,
        trade_id: str,
        leg_parameters: list[dict[str, Any]],
    ) -> None:
        """Insert validated legs for one trade, indexed in request order."""

        if not leg_parameters:
            return
        connection.execute(
            text(self._LEG_INSERT),
            [
                {**leg_parameter, "trade_id": trade_id, "leg_index": leg_index}
                for leg_index, leg_parameter in enumerate(leg_parameters)
            ],
        )

    def _db_trade_merge_update_request(self, current_trade: TradeRecord, request: TradeUpdateRequest) -> dict[str, Any]:
        """Merge a partial update onto the stored trade.

        Args:
            current_trade: Trade as currently stored.
            request: Partial update request.

        Returns:
            dict[str, Any]: SQL-ready trade payload for every updatable column.

        Raises:
            ValueError: Raised when provided values are invalid.
        """

        current_side = "credit" if current_trade.net_credit is not None else "debit"
        current_premium = current_trade.net_credit if current_trade.net_credit is not None else current_trade.net_debit
        side = current_side
        if request.side is not None:
            side = self._db_trade_validate_choice(request.side, TRADE_SIDES, "request.side")
        premium = current_premium if current_premium is not None else Decimal("0")
        if request.premium is not None:
            premium = self._db_trade_validate_decimal(request.premium, "request.premium")
            if premium < Decimal("0"):
                raise ValueError("request.premium must be >= 0")

        symbol = current_trade.symbol
        if request.symbol is not None:
            symbol = request.symbol.strip().upper() if isinstance(request.symbol, str) else ""
            if not symbol:
                raise ValueError("request.symbol must not be blank")

        opened_at = current_trade.opened_at
        if request.opened_at is not None:
            if not isinstance(request.opened_at, date):
                raise ValueError("request.opened_at must be a date")
            opened_at = request.opened_at

        closed_at = current_trade.closed_at
        if "closed_at" in request.cleared_fields:
            closed_at = None
        elif request.closed_at is not None:
            if not isinstance(request.closed_at, date):
                raise ValueError("request.closed_at must be a date when provided")
            closed_at = request.closed_at

        strategy = current_trade.strategy
        if "strategy" in request.cleared_fields:
            strategy = None
        elif request.strategy is not None:
            strategy = self._db_trade_normalize_optional_text(request.strategy)

        notes = current_trade.notes
        if "notes" in request.cleared_fields:
            notes = None
        elif request.notes is not None:
            notes = self._db_trade_normalize_optional_text(request.notes)

        status = current_trade.status
        if request.status is not None:
            status = self._db_trade_validate_choice(request.status, TRADE_STATUSES, "request.status")

        return {
            "symbol": symbol,
            "strategy": strategy,
            "status": status,
            "opened_at": opened_at.isoformat(),
            "closed_at": None if closed_at is None else closed_at.isoformat(),
            "net_credit": str(premium) if side == "credit" else None,
            "net_debit": str(premium) if side == "debit" else None,
            "notes": notes,
        }

    def _db_trade_map_row(self, row: Any) -> TradeRecord:
        """Map SQLAlchemy row to typed trade record.

        Args:
            row: SQLAlchemy row mapping.

        Returns:
            TradeRecord: Typed trade model.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        raw_legs = row["legs"] if isinstance(row["legs"], list) else []
        legs = tuple(
            OptionLegRecord(
                leg_id=UUID(str(leg["option_leg_id"])),
                leg_type=leg["leg_type"],
                position=leg["position"],
                strike=Decimal(str(leg["strike"])),
                expiry=date.fromisoformat(leg["expiry"]),
                quantity=int(leg["quantity"]),
                price=None if leg.get("price") is None else Decimal(str(leg["price"])),
            )
            for leg in raw_legs
        )

        return TradeRecord(
            trade_id=UUID(str(row["trade_id"])),
            user_id=UUID(str(row["user_id"])),
            symbol=row["symbol"],
            strategy=row["strategy"],
            status=row["status"],
            opened_at=row["opened_at"],
            closed_at=row["closed_at"],
            net_credit=None if row["net_credit"] is None else Decimal(str(row["net_credit"])),
            net_debit=None if row["net_debit"] is None else Decimal(str(row["net_debit"])),
            notes=row["notes"],
            legs=legs,
            created_at_utc=row["created_at_utc"],
            updated_at_utc=row["updated_at_utc"],
        )

    def _db_trade_validate_create_request(self, request: TradeCreateRequest) -> dict[str, Any]:
        """Validate one trade create request.

        Args:
            request: Trade create request.

        Returns:
            dict[str, Any]: SQL-ready trade payload.

        Raises:
            ValueError: Raised when request values are invalid.
        """

        if request is None:
            raise ValueError("request must not be None")

        side = self._db_trade_validate_choice(request.side, TRADE_SIDES, "request.side")
        premium = self._db_trade_validate_decimal(request.premium, "request.premium")
        if premium < Decimal("0"):
            raise ValueError("request.premium must be >= 0")
        if not isinstance(request.opened_at, date):
            raise ValueError("request.opened_at must be a date")
        if request.closed_at is not None and not isinstance(request.closed_at, date):
            raise ValueError("request.closed_at must be a date when provided")

        symbol = request.symbol.strip().upper() if isinstance(request.symbol, str) else ""
        if not symbol:
            raise ValueError("request.symbol must not be blank")

        return {
            "user_id": self._db_trade_validate_uuid(request.user_id, "request.user_id"),
            "symbol": symbol,
            "strategy": self._db_trade_normalize_optional_text(request.strategy),
            "status": self._db_trade_validate_choice(request.status, TRADE_STATUSES, "request.status"),
            "opened_at": request.opened_at.isoformat(),
            "closed_at": None if request.closed_at is None else request.closed_at.isoformat(),
            "net_credit": str(premium) if side == "credit" else None,
            "net_debit": str(premium) if side == "debit" else None,
            "notes": self._db_trade_normalize_optional_text(request.notes),
        }

    def _db_trade_validate_leg_request(self, leg: OptionLegCreateRequest) -> dict[str, Any]:
        """Validate one option leg create request.

        Args:
            leg: Option leg create request.

        Returns:
            dict[str, Any]: SQL-ready leg payload without trade id.

        Raises:
            ValueError: Raised when leg values are invalid.
        """

        if leg is None:
            raise ValueError("leg must not be None")
        if not isinstance(leg.quantity, int) or isinstance(leg.quantity, bool) or leg.quantity < 1:
            raise ValueError("leg.quantity must be a positive integer")
        if not isinstance(leg.expiry, date):
            raise ValueError("leg.expiry must be a date")

        return {
            "leg_type": self._db_trade_validate_choice(leg.leg_type, OPTION_LEG_TYPES, "leg.leg_type"),
            "position": self._db_trade_validate_choice(leg.position, OPTION_LEG_POSITIONS, "leg.position"),
            "strike": str(self._db_trade_validate_decimal(leg.strike, "leg.strike")),
            "expiry": leg.expiry.isoformat(),
            "quantity": leg.quantity,
            "price": None if leg.price is None else str(self._db_trade_validate_decimal(leg.price, "leg.price")),
        }

    def _db_trade_validate_choice(self, value: str, allowed_values: tuple[str, ...], field_name: str) -> str:
        """Validate that a text value belongs to a fixed vocabulary.

        Args:
            value: Candidate text value.
            allowed_values: Allowed lowercase values.
            field_name: Field name for deterministic error text.

        Returns:
            str: Normalized lowercase value.

        Raises:
            ValueError: Raised when value is outside the vocabulary.
        """

        if not isinstance(value, str):
            raise ValueError(f"{field_name} must be a string")
        normalized_value = value.strip().lower()
        if normalized_value not in allowed_values:
            raise ValueError(f"{field_name} must be one of: {', '.join(allowed_values)}")
        return normalized_value

    def _db_trade_validate_decimal(self, value: Decimal, field_name: str) -> Decimal:
        """Validate a finite decimal amount.

        Args:
            value: Candidate amount.
            field_name: Field name for deterministic error text.

        Returns:
            Decimal: Validated amount.

        Raises:
            ValueError: Raised when value is not a finite decimal.
        """

        try:
            parsed_value = Decimal(str(value))
        except (InvalidOperation, TypeError) as error:
            raise ValueError(f"{field_name} must be a decimal amount") from error
        if not parsed_value.is_finite():
            raise ValueError(f"{field_name} must be finite")
        return parsed_value

    def _db_trade_validate_uuid(self, value: UUID | str, field_name: str) -> str:
        """Validate UUID input and render it as text.

        Args:
            value: UUID or UUID text.
            field_name: Field name for deterministic error text.

        Returns:
            str: Normalized UUID text.

        Raises:
            ValueError: Raised when UUID is invalid.
        """

        try:
            return str(UUID(str(value)))
        except ValueError as error:
            raise ValueError(f"{field_name} must be a valid UUID") from error

    def _db_trade_normalize_optional_text(self, value: str | None) -> str | None:
        """Normalize optional free text, mapping blank input to None.

        Args:
            value: Optional text value.

        Returns:
            str | None: Stripped text or None.

        Raises:
            ValueError: Raised when provided type is invalid.
        """

        if value is None:
            return None
        if not isinstance(value, str):
            raise ValueError("optional text value must be a string when provided")
        normalized_value = value.strip()
        return normalized_value or None


__all__ = ["SQLAlchemyTradeRepositoryService"]
