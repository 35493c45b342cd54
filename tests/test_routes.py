"""Tests for simple_rest_server.api.routes: route table and HTTP dispatch."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from starlette.websockets import WebSocketDisconnect

from simple_rest_server.api.routes import ROUTE_TABLE, build_router

GREETINGS = {
    "/endpoint1": "Hello from endpoint 1",
    "/endpoint2": "Hello from endpoint 2",
    "/endpoint3": "Hello from endpoint 3",
}


class TestRouteTable:
    def test_contains_exactly_four_get_routes(self) -> None:
        assert set(ROUTE_TABLE) == {
            ("GET", "/endpoint1"),
            ("GET", "/endpoint2"),
            ("GET", "/endpoint3"),
            ("GET", "/health"),
        }

    def test_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            ROUTE_TABLE[("GET", "/extra")] = ROUTE_TABLE[("GET", "/health")]  # type: ignore[index]
        with pytest.raises(TypeError):
            del ROUTE_TABLE[("GET", "/health")]  # type: ignore[attr-defined]

    def test_router_has_one_route_per_entry(self) -> None:
        router = build_router()
        registered = {(method, route.path) for route in router.routes for method in route.methods}
        assert registered == set(ROUTE_TABLE)


class TestGreetings:
    @pytest.mark.parametrize("path,body", sorted(GREETINGS.items()))
    def test_returns_literal_body(self, client, path, body) -> None:
        response = client.get(path)
        assert response.status_code == 200
        assert response.text == body
        assert response.headers["content-type"].startswith("text/plain")

    def test_repeated_calls_are_identical(self, client) -> None:
        bodies = {client.get("/endpoint1").text for _ in range(20)}
        assert bodies == {"Hello from endpoint 1"}

    def test_query_parameters_are_ignored(self, client) -> None:
        response = client.get("/endpoint3", params={"name": "ignored"})
        assert response.status_code == 200
        assert response.text == "Hello from endpoint 3"


class TestHealth:
    def test_empty_ok(self, client) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["content-length"] == "0"

    def test_sets_process_time_header(self, client) -> None:
        response = client.get("/health")
        assert float(response.headers["x-process-time"]) >= 0


class TestUnmatched:
    @pytest.mark.parametrize("path", ["/", "/nonexistent", "/endpoint4", "/health/", "/Endpoint1", "/docs", "/openapi.json"])
    def test_unknown_path_is_404(self, client, path) -> None:
        response = client.get(path)
        assert response.status_code == 404
        assert response.json() == {"detail": "Not Found"}

    def test_unknown_path_with_post_is_404(self, client) -> None:
        assert client.post("/nonexistent").status_code == 404

    def test_websocket_to_unknown_path_is_closed(self, client) -> None:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/nothing"):
                pass
        assert exc_info.value.code == 1000

    def test_http_still_served_after_websocket_rejection(self, client) -> None:
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect("/nonexistent"):
                pass
        assert client.get("/nonexistent").status_code == 404
        assert client.get("/health").status_code == 200

    @pytest.mark.parametrize("method", ["HEAD", "POST", "PUT", "DELETE", "PATCH"])
    @pytest.mark.parametrize("path", ["/endpoint1", "/endpoint2", "/endpoint3", "/health"])
    def test_non_get_on_known_path_is_405(self, client, method, path) -> None:
        response = client.request(method, path)
        assert response.status_code == 405
        assert response.headers["allow"] == "GET"

    def test_request_body_is_not_read(self, client) -> None:
        response = client.request("GET", "/endpoint2", content=b"not json {")
        assert response.status_code == 200
        assert response.text == "Hello from endpoint 2"


class TestConcurrency:
    def test_no_cross_contamination(self, client) -> None:
        expected = dict(GREETINGS, **{"/health": ""})
        paths = list(expected) * 25

        def fetch(path):
            response = client.get(path)
            return path, response.status_code, response.text

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(fetch, paths))

        assert len(results) == len(paths)
        for path, status_code, text in results:
            assert status_code == 200
            assert text == expected[path]
