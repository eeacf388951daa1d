"""Tests for the request context middleware."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from health_links.middleware.request_context import REQUEST_ID_HEADER, RequestContextMiddleware
from health_links.observability.logging import log_context


def make_client() -> TestClient:
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.get("/whoami")
    async def whoami():
        return {"request_id": log_context().get("request_id")}

    return TestClient(app)


class TestRequestContextMiddleware:
    """Test request id assignment and propagation."""

    def test_generates_id(self):
        response = make_client().get("/whoami")

        request_id = response.headers[REQUEST_ID_HEADER]
        assert len(request_id) == 16
        assert response.json()["request_id"] == request_id

    def test_keeps_safe_client_id(self):
        response = make_client().get("/whoami", headers={REQUEST_ID_HEADER: "client-req.42"})

        assert response.headers[REQUEST_ID_HEADER] == "client-req.42"
        assert response.json()["request_id"] == "client-req.42"

    def test_replaces_unsafe_client_id(self):
        response = make_client().get("/whoami", headers={REQUEST_ID_HEADER: "bad id; drop table"})

        assert response.headers[REQUEST_ID_HEADER] != "bad id; drop table"

    def test_replaces_overlong_client_id(self):
        response = make_client().get("/whoami", headers={REQUEST_ID_HEADER: "a" * 65})

        assert len(response.headers[REQUEST_ID_HEADER]) == 16

    def test_extract_request_id(self):
        assert RequestContextMiddleware._extract_request_id("abc") == "abc"
        assert len(RequestContextMiddleware._extract_request_id(None)) == 16
