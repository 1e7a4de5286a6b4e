"""Smoke tests for the FastAPI application."""

import pytest
from fastapi.testclient import TestClient

from ideaboard.api.app import create_app
from ideaboard.events import EventBus


@pytest.fixture
def client(token_issuer):
    app = create_app()
    # Lifespan is not run, so provide what it would have set up
    app.state.token_issuer = token_issuer
    app.state.event_bus = EventBus()
    return TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["user_added_subscribers"] == 0


def test_anonymous_me(client):
    response = client.post("/graphql", json={"query": "{ me { id } }"})

    assert response.status_code == 200
    assert response.json() == {"data": {"me": None}}


def test_protected_query_requires_login(client):
    response = client.post(
        "/graphql",
        json={"query": "query ShouldFail { getBook(id: 1) { id } }"},
    )

    body = response.json()
    assert body["data"] == {"getBook": None}
    assert body["errors"][0]["message"] == "Authentication required"


def test_graphql_can_be_disabled(monkeypatch):
    monkeypatch.setenv("IDEABOARD_DISABLE_GRAPHQL", "1")
    client = TestClient(create_app())

    assert client.post("/graphql", json={"query": "{ me { id } }"}).status_code == 404
    assert client.get("/health").status_code == 200


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"x-request-id": "req-42"})

    assert response.headers["x-request-id"] == "req-42"
    assert client.get("/health").headers["x-request-id"]
