"""Database health service checking connectivity and journal schema presence."""

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from app.domain import HealthStatus

from .interfaces import DatabaseHealthPort

_REQUIRED_TABLE_NAMES = ("app_user", "trade", "option_leg", "analytics_summary")


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Database health service backed by SQLAlchemy catalog queries."""

    def __init__(self, engine: Engine):
        """Initialize database health service.

        Args:
            engine: SQLAlchemy engine used for health checks.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the password-masked target database URL."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Verify connectivity and that every journal table exists.

        Returns:
            HealthStatus: `ok` when the schema is migrated, `schema_missing`
            with the absent table names otherwise.

        Raises:
            ConnectionError: Raised when the database cannot be queried.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        "SELECT table_name FROM information_schema.tables "
                        "WHERE table_schema = current_schema() AND table_name = ANY(:table_names)"
                    ),
                    {"table_names": list(_REQUIRED_TABLE_NAMES)},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise ConnectionError("database connectivity check failed") from error

        present_table_names = {row["table_name"] for row in rows}
        missing_table_names = [name for name in _REQUIRED_TABLE_NAMES if name not in present_table_names]
        if missing_table_names:
            return HealthStatus(
                status="schema_missing",
                detail=f"missing tables: {', '.join(missing_table_names)}; run alembic upgrade head",
            )
        return HealthStatus(status="ok", detail="database connectivity and schema verified")
