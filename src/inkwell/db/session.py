"""Database engine and session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from inkwell.core.errors import StorageError
from inkwell.core.settings import Settings, settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated.
import inkwell.models  # noqa: E402,F401


def build_engine(config: Settings) -> Engine:
    """Create the SQLAlchemy engine described by ``config``.

    Server databases get a bounded pool shared by every request: at most
    ``db_pool_max`` connections, no overflow, ``db_pool_acquire_timeout``
    seconds to wait for a free connection and connections recycled once
    they reach ``db_pool_idle_timeout`` seconds.
    """
    url = config.effective_database_url
    options: dict[str, Any] = {"echo": config.sql_echo}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=config.db_pool_max,
            max_overflow=0,
            pool_timeout=config.db_pool_acquire_timeout,
            pool_recycle=config.db_pool_idle_timeout,
            pool_pre_ping=True,
        )
    return create_engine(url, **options)


engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_connection(bind: Engine | None = None) -> None:
    """Run a trivial query to prove the database is reachable.

    Raises:
        StorageError: If the database cannot be reached
    """
    target = bind if bind is not None else engine
    try:
        with target.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise StorageError("Unable to connect to the database") from exc


def create_tables(bind: Engine | None = None) -> None:
    """Create all database tables. Intended for tests and local tooling."""
    Base.metadata.create_all(bind=bind if bind is not None else engine)


def drop_tables(bind: Engine | None = None) -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=bind if bind is not None else engine)
