# tests/test_routing.py
"""Route ordering for the posts API."""

from fastapi import status
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from inkwell.main import app


def _post_routes() -> list[tuple[str, str]]:
    routes = []
    for route in app.routes:
        if isinstance(route, APIRoute) and route.path.startswith("/api/posts"):
            for method in sorted(route.methods):
                routes.append((method, route.path))
    return routes


def test_literal_paths_registered_before_id_pattern() -> None:
    paths = [path for method, path in _post_routes() if method == "GET"]
    id_position = paths.index("/api/posts/{post_id}")
    for literal in ("/api/posts/count", "/api/posts/recent", "/api/posts/search"):
        assert paths.index(literal) < id_position


def test_route_table() -> None:
    assert set(_post_routes()) == {
        ("GET", "/api/posts/count"),
        ("GET", "/api/posts/recent"),
        ("GET", "/api/posts/search"),
        ("GET", "/api/posts/{post_id}"),
        ("POST", "/api/posts"),
        ("GET", "/api/posts"),
        ("PATCH", "/api/posts/{post_id}"),
        ("DELETE", "/api/posts/{post_id}"),
    }


def test_count_is_not_treated_as_an_id(client: TestClient) -> None:
    response = client.get("/api/posts/count")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"] == 0


def test_unknown_route_uses_envelope(client: TestClient) -> None:
    response = client.get("/api/nothing-here")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["success"] is False
