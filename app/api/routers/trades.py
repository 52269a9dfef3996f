"""Trade journal API router composition for list, create, update, close and delete."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Header, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.db import OptionLegCreateRequest, TradeCreateRequest, TradeUpdateRequest, TradeWriteRepositoryPort
from app.domain import OptionLegRecord, TradeRecord

from ..identity import api_error_response, api_parse_user_id, api_unauthorized_response


class OptionLegBody(BaseModel):
    """Request body for one option leg."""

    leg_type: str
    position: str
    strike: Decimal
    expiry: date
    quantity: int = Field(gt=0)
    price: Decimal | None = None


class TradeCreateBody(BaseModel):
    """Request body for trade creation."""

    symbol: str = Field(min_length=1)
    side: str
    premium: Decimal = Field(ge=0)
    legs: list[OptionLegBody] = Field(min_length=1)
    strategy: str | None = Field(default=None, max_length=160)
    status: str = "open"
    opened_at: date | None = None
    closed_at: date | None = None
    notes: str | None = Field(default=None, max_length=1000)


class TradeUpdateBody(BaseModel):
    """Request body for partial trade updates; at least one field is required."""

    symbol: str | None = Field(default=None, min_length=1)
    side: str | None = None
    premium: Decimal | None = Field(default=None, ge=0)
    legs: list[OptionLegBody] | None = Field(default=None, min_length=1)
    strategy: str | None = Field(default=None, max_length=160)
    status: str | None = None
    opened_at: date | None = None
    closed_at: date | None = None
    notes: str | None = Field(default=None, max_length=1000)


_NULLABLE_UPDATE_FIELDS = ("strategy", "closed_at", "notes")


class TradeCloseBody(BaseModel):
    """Request body for closing a trade."""

    closed_at: date
    status: str = "closed"


def api_create_trades_router(trade_repository: TradeWriteRepositoryPort) -> APIRouter:
    """Create trades router exposing user-scoped journal endpoints.

    Args:
        trade_repository: DB-layer trade repository.

    Returns:
        APIRouter: Router exposing `/trades` endpoints.

    Raises:
        ValueError: Raised when trade_repository is invalid.
    """

    if trade_repository is None:
        raise ValueError("trade_repository must not be None")

    router = APIRouter(prefix="/trades", tags=["trades"])

    @router.get("")
    def api_trade_list(x_user_id: str | None = Header(default=None)) -> JSONResponse:
        """Return the caller's trades, latest opened first.

        Args:
            x_user_id: Caller identity header.

        Returns:
            JSONResponse: Trade list payload.

        Raises:
            RuntimeError: Raised when repository read fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        trade_records = trade_repository.db_trade_list_for_user(user_id=user_id)
        payload = {"trades": [api_serialize_trade_record(trade_record) for trade_record in trade_records]}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("")
    def api_trade_create(body: TradeCreateBody, x_user_id: str | None = Header(default=None)) -> JSONResponse:
        """Create one trade with its option legs.

        Args:
            body: Trade create body.
            x_user_id: Caller identity header.

        Returns:
            JSONResponse: Created trade payload with status 201, or 400 on invalid values.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        create_request = TradeCreateRequest(
            user_id=user_id,
            symbol=body.symbol,
            side=body.side,
            premium=body.premium,
            legs=_api_build_leg_requests(body.legs),
            opened_at=body.opened_at or datetime.now(timezone.utc).date(),
            strategy=body.strategy,
            status=body.status,
            closed_at=body.closed_at,
            notes=body.notes,
        )
        try:
            trade_record = trade_repository.db_trade_create(create_request)
        except ValueError as error:
            return api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_TRADE", str(error))

        payload = {"trade": api_serialize_trade_record(trade_record)}
        return JSONResponse(content=payload, status_code=status.HTTP_201_CREATED)

    @router.get("/{trade_id}")
    def api_trade_detail(trade_id: UUID, x_user_id: str | None = Header(default=None)) -> JSONResponse:
        """Return one trade owned by the caller.

        Args:
            trade_id: Trade identifier.
            x_user_id: Caller identity header.

        Returns:
            JSONResponse: Trade payload or 404 when absent.

        Raises:
            RuntimeError: Raised when repository read fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        trade_record = trade_repository.db_trade_get(user_id=user_id, trade_id=trade_id)
        if trade_record is None:
            return api_error_response(status.HTTP_404_NOT_FOUND, "TRADE_NOT_FOUND", f"trade_id={trade_id} not found")

        return JSONResponse(content={"trade": api_serialize_trade_record(trade_record)}, status_code=status.HTTP_200_OK)

    @router.put("/{trade_id}")
    def api_trade_update(
        trade_id: UUID,
        body: TradeUpdateBody,
        x_user_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Partially update one trade owned by the caller.

        Explicit null clears `strategy`, `closed_at` or `notes`; a trade is
        reopened by clearing `closed_at`. Provided `legs` replace every stored leg.

        Args:
            trade_id: Trade identifier.
            body: Partial update body.
            x_user_id: Caller identity header.

        Returns:
            JSONResponse: Updated trade payload, 400 on empty or invalid body, or 404 when absent.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        provided_fields = body.model_fields_set
        if not provided_fields:
            return api_error_response(
                status.HTTP_400_BAD_REQUEST,
                "INVALID_REQUEST",
                "at least one field must be provided",
            )
        null_fields = sorted(field for field in provided_fields if getattr(body, field) is None)
        non_nullable_fields = [field for field in null_fields if field not in _NULLABLE_UPDATE_FIELDS]
        if non_nullable_fields:
            return api_error_response(
                status.HTTP_400_BAD_REQUEST,
                "INVALID_TRADE",
                f"fields must not be null: {', '.join(non_nullable_fields)}",
            )

        update_request = TradeUpdateRequest(
            symbol=body.symbol,
            side=body.side,
            premium=body.premium,
            legs=None if body.legs is None else _api_build_leg_requests(body.legs),
            strategy=body.strategy,
            status=body.status,
            opened_at=body.opened_at,
            closed_at=body.closed_at,
            notes=body.notes,
            cleared_fields=frozenset(null_fields),
        )
        try:
            trade_record = trade_repository.db_trade_update(user_id=user_id, trade_id=trade_id, request=update_request)
        except ValueError as error:
            return api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_TRADE", str(error))
        if trade_record is None:
            return api_error_response(status.HTTP_404_NOT_FOUND, "TRADE_NOT_FOUND", f"trade_id={trade_id} not found")

        return JSONResponse(content={"trade": api_serialize_trade_record(trade_record)}, status_code=status.HTTP_200_OK)

    @router.post("/{trade_id}/close")
    def api_trade_close(
        trade_id: UUID,
        body: TradeCloseBody,
        x_user_id: str | None = Header(default=None),
    ) -> JSONResponse:
        """Close one trade owned by the caller.

        Args:
            trade_id: Trade identifier.
            body: Close body carrying the close date.
            x_user_id: Caller identity header.

        Returns:
            JSONResponse: Updated trade payload, 400 on invalid status, or 404 when absent.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        try:
            trade_record = trade_repository.db_trade_close(
                user_id=user_id,
                trade_id=trade_id,
                closed_at=body.closed_at,
                status=body.status,
            )
        except ValueError as error:
            return api_error_response(status.HTTP_400_BAD_REQUEST, "INVALID_TRADE", str(error))
        if trade_record is None:
            return api_error_response(status.HTTP_404_NOT_FOUND, "TRADE_NOT_FOUND", f"trade_id={trade_id} not found")

        return JSONResponse(content={"trade": api_serialize_trade_record(trade_record)}, status_code=status.HTTP_200_OK)

    @router.delete("/{trade_id}")
    def api_trade_delete(trade_id: UUID, x_user_id: str | None = Header(default=None)) -> Response:
        """Delete one trade owned by the caller.

        Args:
            trade_id: Trade identifier.
            x_user_id: Caller identity header.

        Returns:
            Response: Empty 204 response, or 404 when absent.

        Raises:
            RuntimeError: Raised when persistence fails.
        """

        user_id = api_parse_user_id(x_user_id)
        if user_id is None:
            return api_unauthorized_response()

        if not trade_repository.db_trade_delete(user_id=user_id, trade_id=trade_id):
            return api_error_response(status.HTTP_404_NOT_FOUND, "TRADE_NOT_FOUND", f"trade_id={trade_id} not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


def api_serialize_trade_record(trade_record: TradeRecord) -> dict[str, object]:
    """Serialize one typed trade record to JSON payload.

    Args:
        trade_record: Typed trade record.

    Returns:
        dict[str, object]: JSON-serializable trade payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "trade_id": str(trade_record.trade_id),
        "symbol": trade_record.symbol,
        "strategy": trade_record.strategy,
        "status": trade_record.status,
        "opened_at": trade_record.opened_at.isoformat(),
        "closed_at": trade_record.closed_at.isoformat() if trade_record.closed_at is not None else None,
        "net_credit": _api_optional_amount(trade_record.net_credit),
        "net_debit": _api_optional_amount(trade_record.net_debit),
        "notes": trade_record.notes,
        "legs": [_api_serialize_option_leg(leg) for leg in trade_record.legs],
        "created_at_utc": trade_record.created_at_utc.isoformat(),
        "updated_at_utc": trade_record.updated_at_utc.isoformat(),
    }


def _api_build_leg_requests(legs: list[OptionLegBody]) -> tuple[OptionLegCreateRequest, ...]:
    """Convert leg bodies to db-layer leg requests in request order."""

    return tuple(
        OptionLegCreateRequest(
            leg_type=leg.leg_type,
            position=leg.position,
            strike=leg.strike,
            expiry=leg.expiry,
            quantity=leg.quantity,
            price=leg.price,
        )
        for leg in legs
    )


def _api_serialize_option_leg(leg: OptionLegRecord) -> dict[str, object]:
    return {
        "leg_id": str(leg.leg_id),
        "leg_type": leg.leg_type,
        "position": leg.position,
        "strike": str(leg.strike),
        "expiry": leg.expiry.isoformat(),
        "quantity": leg.quantity,
        "price": _api_optional_amount(leg.price),
    }


def _api_optional_amount(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None
