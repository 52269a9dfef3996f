"""Caller identity resolution shared by user-scoped routers.

The `X-User-Id` header is trusted as-is and is not an authentication
mechanism. It must be set by a trusted upstream authenticator (gateway or
reverse proxy) that strips any client-supplied value.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import status
from fastapi.responses import JSONResponse

USER_ID_HEADER = "X-User-Id"


def api_parse_user_id(raw_user_id: str | None) -> UUID | None:
    """Parse the caller user identifier from a raw header value.

    Args:
        raw_user_id: Raw `X-User-Id` header value, possibly missing.

    Returns:
        UUID | None: Parsed identifier, or None when missing, blank or malformed.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if raw_user_id is None:
        return None
    normalized_user_id = raw_user_id.strip()
    if not normalized_user_id:
        return None
    try:
        return UUID(normalized_user_id)
    except ValueError:
        return None


def api_unauthorized_response() -> JSONResponse:
    """Build the error response returned when caller identity is missing."""

    payload = {
        "status": "error",
        "code": "UNAUTHENTICATED",
        "message": f"{USER_ID_HEADER} header must be a valid UUID",
    }
    return JSONResponse(content=payload, status_code=status.HTTP_401_UNAUTHORIZED)


def api_error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Build one error envelope response.

    Args:
        status_code: HTTP status code.
        code: Stable machine-readable error code.
        message: Human-readable error message.

    Returns:
        JSONResponse: Error envelope payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    payload = {"status": "error", "code": code, "message": message}
    return JSONResponse(content=payload, status_code=status_code)


__all__ = ["USER_ID_HEADER", "api_error_response", "api_parse_user_id", "api_unauthorized_response"]
