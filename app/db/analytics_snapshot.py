"""Database service for cached analytics snapshot persistence."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from app.domain import AnalyticsSnapshot, domain_analytics_snapshot_from_payload, domain_analytics_snapshot_to_payload

from .interfaces import AnalyticsSnapshotRepositoryPort, StoredAnalyticsSnapshotRecord


class SQLAlchemyAnalyticsSnapshotService(AnalyticsSnapshotRepositoryPort):
    """SQLAlchemy implementation for analytics snapshot cache DB operations."""

    _SNAPSHOT_COLUMNS = "user_id, label, report_date, calculated_at_utc, snapshot"

    def __init__(self, engine: Engine):
        """Initialize analytics snapshot database service.

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

    def db_analytics_snapshot_get_latest(self, user_id: UUID, label: str) -> StoredAnalyticsSnapshotRecord | None:
        """Fetch the latest stored snapshot for one user and label.

        Args:
            user_id: Owning user identifier.
            label: Snapshot label.

        Returns:
            StoredAnalyticsSnapshotRecord | None: Latest row, or None when absent.

        Raises:
            ValueError: Raised when input values are invalid.
            RuntimeError: Raised when database read fails.
        """

        parameters = {
            "user_id": self._db_snapshot_validate_uuid(user_id, "user_id"),
            "label": self._db_snapshot_validate_non_empty_text(label, "label"),
        }

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        f"SELECT {self._SNAPSHOT_COLUMNS} "
                        "FROM analytics_summary "
                        "WHERE user_id = CAST(:user_id AS uuid) AND label = :label "
                        "ORDER BY report_date desc, calculated_at_utc desc "
                        "LIMIT 1"
                    ),
                    parameters,
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("analytics snapshot read failed") from error

        if not rows:
            return None
        return self._db_snapshot_map_row(rows[0])

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
            calculated_at: Offset-aware calculation timestamp written with the row.

        Returns:
            StoredAnalyticsSnapshotRecord: Row as persisted.

        Raises:
            ValueError: Raised when input values are invalid.
            RuntimeError: Raised when persistence fails.
        """

        if snapshot is None:
            raise ValueError("snapshot must not be None")
        if not isinstance(report_date, date):
            raise ValueError("report_date must be a date")
        if not isinstance(calculated_at, datetime) or calculated_at.utcoffset() is None:
            raise ValueError("calculated_at must be an offset-aware datetime")

        parameters = {
            "user_id": self._db_snapshot_validate_uuid(user_id, "user_id"),
            "label": self._db_snapshot_validate_non_empty_text(label, "label"),
            "report_date": report_date.isoformat(),
            "calculated_at_utc": calculated_at.isoformat(),
            "snapshot": json.dumps(domain_analytics_snapshot_to_payload(snapshot)),
        }

        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(
                        "INSERT INTO app_user (user_id) VALUES (CAST(:user_id AS uuid)) "
                        "ON CONFLICT (user_id) DO NOTHING"
                    ),
                    {"user_id": parameters["user_id"]},
                )
                row = connection.execute(
                    text(
                        "INSERT INTO analytics_summary (user_id, label, report_date, snapshot, calculated_at_utc) "
                        "VALUES (CAST(:user_id AS uuid), :label, CAST(:report_date AS date), "
                        "CAST(:snapshot AS jsonb), CAST(:calculated_at_utc AS timestamptz)) "
                        "ON CONFLICT ON CONSTRAINT uq_analytics_summary_user_label_date DO UPDATE SET "
                        "snapshot = EXCLUDED.snapshot, "
                        "calculated_at_utc = EXCLUDED.calculated_at_utc "
                        f"RETURNING {self._SNAPSHOT_COLUMNS}"
                    ),
                    parameters,
                ).mappings().one()
        except SQLAlchemyError as error:
            raise RuntimeError("analytics snapshot upsert failed") from error

        return self._db_snapshot_map_row(row)

    def _db_snapshot_map_row(self, row: Any) -> StoredAnalyticsSnapshotRecord:
        """Map SQLAlchemy row to typed stored snapshot record.

        Args:
            row: SQLAlchemy row mapping.

        Returns:
            StoredAnalyticsSnapshotRecord: Typed stored snapshot model.

        Raises:
            ValueError: Raised when the stored payload is malformed.
        """

        snapshot_payload = row["snapshot"]
        if isinstance(snapshot_payload, str):
            snapshot_payload = json.loads(snapshot_payload)

        return StoredAnalyticsSnapshotRecord(
            user_id=UUID(str(row["user_id"])),
            label=row["label"],
            report_date=row["report_date"],
            calculated_at=row["calculated_at_utc"],
            snapshot=domain_analytics_snapshot_from_payload(snapshot_payload),
        )

    def _db_snapshot_validate_non_empty_text(self, value: str, field_name: str) -> str:
        """Validate required text and normalize surrounding whitespace.

        Args:
            value: Candidate text value.
            field_name: Field name for deterministic error text.

        Returns:
            str: Normalized text value.

        Raises:
            ValueError: Raised when value is invalid.
        """

        if not isinstance(value, str):
            raise ValueError(f"{field_name} must be a string")

        normalized_value = value.strip()
        if not normalized_value:
            raise ValueError(f"{field_name} must not be blank")

        return normalized_value

    def _db_snapshot_validate_uuid(self, value: UUID | str, field_name: str) -> str:
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


__all__ = ["SQLAlchemyAnalyticsSnapshotService"]
