# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "test"
os.environ["SQL_DEBUG"] = "false"
os.environ["VERIFY_SCHEMA_ON_STARTUP"] = "false"
os.environ["AUTH_REQUIRED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

from inkwell.db.session import Base, create_tables, drop_tables  # noqa: E402
from inkwell.db.session import get_db as app_get_session  # noqa: E402
from inkwell.main import app as fastapi_app  # noqa: E402
from inkwell.models import Post  # noqa: E402
from inkwell.repositories.post_repo import PostRepository  # noqa: E402

TEST_DB_URL = "sqlite://"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Repository writes commit, so wipe rows to keep tests independent.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def repo(db_session: Session) -> PostRepository:
    return PostRepository(db_session)


@pytest.fixture()
def post_payload() -> dict[str, Any]:
    """Return a valid create payload."""
    return {
        "title": "My First Post",
        "author": "Jane",
        "body": "Hello from the blog.",
        "category": ["life"],
        "date": "2024-01-01",
    }


@pytest.fixture()
def make_post(repo: PostRepository) -> Callable[..., Post]:
    """Persist a post through the repository, overriding payload fields."""

    def _make(**overrides: Any) -> Post:
        payload: dict[str, Any] = {
            "title": "A sample post",
            "author": "Jane",
            "body": "Body text",
            "category": ["general"],
        }
        payload.update(overrides)
        return repo.create(payload)

    return _make
