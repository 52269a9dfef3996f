"""Timezone helpers for analytics snapshot report-date boundaries."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo


def analytics_resolve_report_date(timestamp: datetime, report_timezone: str = "UTC") -> date:
    """Resolve the report date of a timestamp in the configured timezone.

    Args:
        timestamp: Offset-aware timestamp.
        report_timezone: IANA timezone name used for business dates.

    Returns:
        date: Local report date.

    Raises:
        ValueError: Raised when timestamp is offset-naive or timezone is blank.
    """

    if not isinstance(timestamp, datetime):
        raise ValueError("timestamp must be a datetime")
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        raise ValueError("timestamp must be offset-aware")
    if not report_timezone.strip():
        raise ValueError("report_timezone must not be blank")

    return timestamp.astimezone(ZoneInfo(report_timezone.strip())).date()


__all__ = ["analytics_resolve_report_date"]
