# tests/test_schema_guard.py
"""Tests for the startup schema version check."""

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from inkwell.core.errors import SchemaVersionError, StorageError
from inkwell.db.schema import EXPECTED_REVISION, verify_schema
from inkwell.db.session import check_connection


@pytest.fixture()
def blank_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    try:
        yield engine
    finally:
        engine.dispose()


def _record_revision(engine: Engine, revision: str) -> None:
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE alembic_version (version_num VARCHAR(32) NOT NULL)"))
        conn.execute(text("INSERT INTO alembic_version VALUES (:rev)"), {"rev": revision})


def test_unversioned_database_fails(blank_engine: Engine) -> None:
    with pytest.raises(SchemaVersionError):
        verify_schema(blank_engine)


def test_mismatched_revision_fails(blank_engine: Engine) -> None:
    _record_revision(blank_engine, "0000_something_else")
    with pytest.raises(SchemaVersionError) as exc_info:
        verify_schema(blank_engine)
    assert "0000_something_else" in str(exc_info.value)


def test_expected_revision_passes(blank_engine: Engine) -> None:
    _record_revision(blank_engine, EXPECTED_REVISION)
    assert verify_schema(blank_engine) == EXPECTED_REVISION


def test_schema_error_is_a_storage_error() -> None:
    assert issubclass(SchemaVersionError, StorageError)


def test_check_connection_succeeds(blank_engine: Engine) -> None:
    check_connection(blank_engine)


def test_check_connection_reports_unreachable_database(tmp_path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path}/missing/dir/blog.db")
    try:
        with pytest.raises(StorageError):
            check_connection(engine)
    finally:
        engine.dispose()
