"""Guard that the live database schema matches this build.

The service never alters the schema itself. Migrations are applied
out-of-band with ``python -m inkwell.scripts.migrate`` and startup fails
fast when the recorded Alembic revision differs from ``EXPECTED_REVISION``.
"""
from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from inkwell.core.errors import SchemaVersionError, StorageError

logger = logging.getLogger(__name__)

# Head revision of migrations/versions; bump together with new migrations.
EXPECTED_REVISION = "0001_create_post"

VERSION_TABLE = "alembic_version"


def current_revision(connection: Connection) -> str | None:
    """Return the revision recorded in the Alembic version table, if any."""
    if not inspect(connection).has_table(VERSION_TABLE):
        return None
    row = connection.execute(text(f"SELECT version_num FROM {VERSION_TABLE}")).first()
    return row[0] if row else None


def verify_schema(bind: Engine, expected: str = EXPECTED_REVISION) -> str:
    """Ensure the database has been migrated to ``expected``.

    Returns:
        The verified revision identifier

    Raises:
        SchemaVersionError: If no revision is recorded or it differs
        StorageError: If the database cannot be queried
    """
    try:
        with bind.connect() as connection:
            revision = current_revision(connection)
    except SQLAlchemyError as exc:
        raise StorageError("Unable to read schema version") from exc

    if revision is None:
        raise SchemaVersionError(
            "Database schema is not versioned; run the migrations before starting"
        )
    if revision != expected:
        raise SchemaVersionError(
            f"Database schema revision {revision!r} does not match expected {expected!r}"
        )
    logger.info("Database schema at revision %s", revision)
    return revision
