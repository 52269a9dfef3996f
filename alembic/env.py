"""Alembic environment for the trade journal schema.

Migrations are hand-written SQLAlchemy operations, so no metadata is bound
for autogenerate. The target URL always comes from application settings.
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import Connection, create_engine, pool

from app.config import config_load_database_url

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name, disable_existing_loggers=False)

logger = logging.getLogger("alembic.env")


def _migration_configure(connection: Connection | None = None, url: str | None = None) -> None:
    """Configure the migration context for either a live connection or a URL."""

    context.configure(
        connection=connection,
        url=url,
        target_metadata=None,
        literal_binds=connection is None,
        dialect_opts={"paramstyle": "named"} if connection is None else None,
        compare_type=True,
    )


def run_migrations_offline() -> None:
    """Emit migration SQL for the configured database without connecting."""

    _migration_configure(url=config_load_database_url())
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured database."""

    engine = create_engine(config_load_database_url(), poolclass=pool.NullPool)
    logger.info("Running journal migrations target=%s", engine.url.render_as_string(hide_password=True))
    try:
        with engine.connect() as connection:
            _migration_configure(connection=connection)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
