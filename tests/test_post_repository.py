# tests/test_post_repository.py
"""Tests for PostRepository against SQLite."""

import math
import uuid
from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from inkwell.core.errors import StorageError, ValidationError
from inkwell.db.time import as_utc
from inkwell.repositories.post_repo import PostRepository, category_contains, utc_date_text


def test_create_assigns_server_fields(repo: PostRepository, post_payload) -> None:
    """Round-trip: stored post matches the payload plus server fields."""
    post = repo.create(post_payload)

    assert isinstance(post.id, uuid.UUID)
    assert post.created_at is not None
    assert post.updated_at is not None

    fetched = repo.get_by_id(post.id)
    assert fetched is not None
    assert fetched.title == post_payload["title"]
    assert fetched.author == post_payload["author"]
    assert fetched.body == post_payload["body"]
    assert fetched.category == ["life"]
    assert fetched.favorite is False
    assert as_utc(fetched.date) == datetime(2024, 1, 1, tzinfo=UTC)


def test_create_defaults_date_to_now(repo: PostRepository, post_payload) -> None:
    post_payload.pop("date")
    before = datetime.now(UTC)
    post = repo.create(post_payload)
    after = datetime.now(UTC)

    assert before <= as_utc(post.date) <= after


def test_create_rejects_invalid_payload(repo: PostRepository) -> None:
    with pytest.raises(ValidationError):
        repo.create({"title": "hi"})
    assert repo.count() == 0


def test_get_by_id_missing_returns_none(repo: PostRepository) -> None:
    assert repo.get_by_id(uuid.uuid4()) is None


def test_get_all_empty(repo: PostRepository) -> None:
    assert repo.get_all() == []


def test_get_all_newest_first(repo: PostRepository, make_post) -> None:
    make_post(title="Oldest post", date="2023-01-01")
    make_post(title="Newest post", date="2025-01-01")
    make_post(title="Middle post", date="2024-01-01")

    titles = [post.title for post in repo.get_all()]
    assert titles == ["Newest post", "Middle post", "Oldest post"]


def test_ties_on_date_are_deterministic(repo: PostRepository, make_post) -> None:
    for index in range(4):
        make_post(title=f"Same day {index}", date="2024-05-05")

    first = [post.id for post in repo.get_all()]
    second = [post.id for post in repo.get_all()]
    assert first == second


def test_pagination_pages_concatenate_to_get_all(repo: PostRepository, make_post) -> None:
    for day in range(1, 8):
        make_post(title=f"Post number {day}", date=f"2024-03-0{day}")

    limit = 3
    total = repo.count()
    _, pagination = repo.get_paginated(1, limit)
    assert pagination.total == total == 7
    assert pagination.total_pages == math.ceil(total / limit) == 3

    collected = []
    for page in range(1, pagination.total_pages + 1):
        posts, meta = repo.get_paginated(page, limit)
        assert meta.page == page
        assert meta.limit == limit
        collected.extend(post.id for post in posts)

    assert collected == [post.id for post in repo.get_all()]


def test_page_past_the_end_is_empty(repo: PostRepository, make_post) -> None:
    make_post()
    posts, pagination = repo.get_paginated(5, 10)
    assert posts == []
    assert pagination.total_pages == 1


def test_count_and_delete(repo: PostRepository, make_post) -> None:
    post = make_post()
    make_post()
    assert repo.count() == 2

    assert repo.delete(post.id) is True
    assert repo.count() == 1
    assert repo.get_by_id(post.id) is None
    assert repo.delete(post.id) is False


def test_recent_is_prefix_of_get_all(repo: PostRepository, make_post) -> None:
    for day in range(1, 8):
        make_post(title=f"Post number {day}", date=f"2024-02-0{day}")

    recent = repo.get_recent(5)
    everything = repo.get_all()
    assert [post.id for post in recent] == [post.id for post in everything[:5]]

    dates = [as_utc(post.date) for post in recent]
    assert dates == sorted(dates, reverse=True)


def test_recent_with_fewer_posts_than_limit(repo: PostRepository, make_post) -> None:
    make_post()
    assert len(repo.get_recent(5)) == 1


def test_search_matches_title_case_insensitively(repo: PostRepository, make_post) -> None:
    make_post(title="Notes about Alice", category=["travel"])
    make_post(title="Unrelated entry", category=["food"])

    upper = {post.id for post in repo.search("ALICE")}
    lower = {post.id for post in repo.search("alice")}
    assert upper == lower
    assert len(lower) == 1


def test_search_matches_category(repo: PostRepository, make_post) -> None:
    make_post(title="Weekend trip", category=["Travel", "Alps"])
    make_post(title="Bread recipe", category=["food"])

    results = repo.search("travel")
    assert [post.title for post in results] == ["Weekend trip"]


def test_search_matches_date_prefix(repo: PostRepository, make_post) -> None:
    make_post(title="January entry", date="2024-01-15")
    make_post(title="March entry", date="2024-03-15")

    results = repo.search("2024-01")
    assert [post.title for post in results] == ["January entry"]


def test_search_treats_wildcards_literally(repo: PostRepository, make_post) -> None:
    make_post(title="Discount 100% off")
    make_post(title="Plain title here")

    assert [post.title for post in repo.search("100%")] == ["Discount 100% off"]
    assert [post.title for post in repo.search("%")] == ["Discount 100% off"]


def test_search_matches_each_category_tag_alone(repo: PostRepository, make_post) -> None:
    make_post(title="Weekend trip", category=["travel", "alps"])
    make_post(title="Bread recipe", category=["food"])

    for query in ("[", "]", "{", '"', ",", 'l", "a', "travel,alps"):
        assert repo.search(query) == [], query
    assert [post.title for post in repo.search("alps")] == ["Weekend trip"]


def test_search_matches_non_ascii_category(repo: PostRepository, make_post) -> None:
    make_post(title="Morning coffee", category=["café"])
    make_post(title="Bread recipe", category=["food"])

    assert [post.title for post in repo.search("café")] == ["Morning coffee"]


def test_search_matches_date_in_utc(repo: PostRepository, make_post) -> None:
    make_post(title="Late evening entry", date="2024-01-01T02:00:00+05:00")

    assert [post.title for post in repo.search("2023-12-31 21:00")] == ["Late evening entry"]
    assert repo.search("2024-01-01") == []


def test_postgresql_search_clauses_are_timezone_and_tag_aware() -> None:
    dialect = postgresql.dialect()

    date_sql = str(utc_date_text("postgresql").compile(dialect=dialect))
    assert "to_char(timezone(" in date_sql
    assert "post.date" in date_sql

    category_sql = str(category_contains("postgresql", "alps").compile(dialect=dialect))
    assert "unnest(post.category)" in category_sql
    assert "CAST(post.category" not in category_sql


def test_update_changes_only_supplied_fields(repo: PostRepository, make_post) -> None:
    post = make_post(title="Original title", body="Original body")
    created_at = as_utc(post.created_at)
    original_updated = as_utc(post.updated_at)
    later = datetime(2099, 1, 1, tzinfo=UTC)

    with patch("inkwell.repositories.post_repo.utcnow", return_value=later):
        updated = repo.update(post.id, {"title": "Changed title"})

    assert updated is not None
    assert updated.id == post.id
    assert updated.title == "Changed title"
    assert updated.body == "Original body"
    assert as_utc(updated.created_at) == created_at
    assert as_utc(updated.updated_at) == later
    assert as_utc(updated.updated_at) > original_updated


def test_update_missing_post_returns_none(repo: PostRepository) -> None:
    assert repo.update(uuid.uuid4(), {"favorite": True}) is None


def test_update_rejects_invalid_fields(repo: PostRepository, make_post) -> None:
    post = make_post(title="Original title")
    with pytest.raises(ValidationError):
        repo.update(post.id, {"title": "no"})
    assert repo.get_by_id(post.id).title == "Original title"


def test_storage_failures_become_storage_errors(repo: PostRepository) -> None:
    failure = OperationalError("SELECT 1", {}, Exception("connection lost"))
    with patch.object(repo.session, "scalar", side_effect=failure):
        with pytest.raises(StorageError):
            repo.count()
