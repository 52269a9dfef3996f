"""Database engine construction for the db layer."""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

logger = logging.getLogger(__name__)


def db_create_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for PostgreSQL application access.

    Args:
        database_url: SQLAlchemy PostgreSQL URL.

    Returns:
        Engine: Engine with connection liveness checks on checkout.

    Raises:
        ValueError: Raised when the URL is blank, malformed or not PostgreSQL.
    """

    normalized_url = database_url.strip()
    if not normalized_url:
        raise ValueError("database_url must not be blank")

    try:
        parsed_url = make_url(normalized_url)
    except ArgumentError as error:
        raise ValueError("database_url must be a valid SQLAlchemy URL") from error
    if parsed_url.get_backend_name() != "postgresql":
        raise ValueError(f"database_url must target postgresql, got backend={parsed_url.get_backend_name()}")

    engine = create_engine(parsed_url, pool_pre_ping=True)
    logger.info("Database engine created target=%s", engine.url.render_as_string(hide_password=True))
    return engine
