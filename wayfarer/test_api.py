"""pytest tests for the HTTP surface."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from wayfarer.config import Settings
from wayfarer.llm.search_client import TravelSearchClient
from wayfarer.main import create_app


def provider_reply(request):
    body = json.loads(request.content)
    if "nothing" in body["prompt"]:
        return httpx.Response(200, json={"text": "No ideas, sorry."})
    return httpx.Response(200, json={"output_text": 'Here: [{"title": "Azores", "price_estimate": 900}] enjoy'})


@pytest.fixture
def config(tmp_path):
    config = Settings()
    config.API_ENV = "development"
    config.COMMENTS_BACKEND = "local"
    config.COMMENTS_FILE = str(tmp_path / "comments.json")
    config.GEMINI_API_URL = "https://llm.example.test/v1/generate"
    config.GEMINI_API_KEY = "secret-key"
    config.GEMINI_AUTH_MODE = "bearer"
    config.GEMINI_REQUEST_FORMAT = "generic"
    config.STATIC_DIR = ""
    config.CORS_ORIGINS = "*"
    return config


@pytest.fixture
def client(config):
    search_client = TravelSearchClient(config, transport=httpx.MockTransport(provider_reply))
    app = create_app(config, search_client=search_client)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_search_returns_results(client):
    response = client.post("/search", json={"query": "volcanic islands", "budget": "moderate"})
    assert response.status_code == 200
    assert response.json() == {"results": [{"title": "Azores", "price_estimate": 900}]}


def test_search_legacy_path(client):
    response = client.post("/api/gemini-search", json={"query": "volcanic islands"})
    assert response.status_code == 200
    assert response.json()["results"][0]["title"] == "Azores"


@pytest.mark.parametrize("payload", [
    {},
    {"query": ""},
    {"query": "   "},
    {"query": "x" * 501},
    {"query": "ok", "max_results": 0},
    {"query": "ok", "max_results": 21},
    {"query": "ok", "budget": "free"},
])
def test_search_input_errors(client, payload):
    response = client.post("/search", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "invalid request"
    assert response.json()["fields"]


def test_search_unparseable_provider_is_gateway_error(client):
    response = client.post("/search", json={"query": "nothing at all"})
    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "provider response not understood"
    assert "No ideas" not in json.dumps(body)


def test_search_hides_detail_in_production(config):
    config.API_ENV = "production"

    def failing(request):
        return httpx.Response(503, text="upstream exploded")

    app = create_app(config, search_client=TravelSearchClient(config, transport=httpx.MockTransport(failing)))
    with TestClient(app) as test_client:
        response = test_client.post("/search", json={"query": "anything"})
    assert response.status_code == 502
    assert response.json() == {"error": "failed to query search provider"}


def test_comment_lifecycle(client, config):
    assert client.get("/comments").json() == []

    init = client.get("/comments/init").json()
    assert init == {"created": True, "reason": "created"}
    assert client.get("/comments/init").json() == {"created": False, "reason": "already exists"}

    created = client.post("/comments", json={"name": "Ada", "text": "<b>great</b> trip"})
    assert created.status_code == 201
    comment = created.json()
    assert comment["name"] == "Ada"
    assert comment["text"] == "&lt;b&gt;great&lt;/b&gt; trip"
    assert comment["id"] and comment["created_at"]

    second = client.post("/api/comments", json={"name": "Grace", "comment": "alias works"}).json()
    assert second["text"] == "alias works"

    listed = client.get("/comments").json()
    assert [c["id"] for c in listed] == [second["id"], comment["id"]]

    assert client.delete(f"/comments/{comment['id']}").status_code == 204
    assert client.delete(f"/comments/{comment['id']}").status_code == 404

    with open(config.COMMENTS_FILE, encoding="utf-8") as fh:
        assert [c["id"] for c in json.load(fh)] == [second["id"]]


def test_comment_message_alias(client):
    response = client.post("/comments", json={"name": "Lin", "message": "hello"})
    assert response.status_code == 201
    assert response.json()["text"] == "hello"


def test_comment_validation_errors(client):
    response = client.post("/comments", json={"name": "n" * 101, "text": "hi"})
    assert response.status_code == 400
    assert response.json() == {"error": "name must be at most 100 characters", "field": "name"}

    response = client.post("/comments", json={"name": "Ada", "text": "   "})
    assert response.status_code == 400
    assert response.json()["field"] == "text"

    assert client.post("/comments", json={"name": "n" * 100, "text": "ok"}).status_code == 201


def test_delete_unknown_comment(client):
    response = client.delete("/comments/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "not found"}


def test_corrupt_store_is_server_error(client, config):
    with open(config.COMMENTS_FILE, "w", encoding="utf-8") as fh:
        fh.write("not json")
    response = client.get("/comments")
    assert response.status_code == 500
    assert response.json() == {"error": "stored comments could not be read"}


def test_malformed_stored_record_does_not_break_listing(client, config):
    with open(config.COMMENTS_FILE, "w", encoding="utf-8") as fh:
        json.dump([
            {"id": "good", "name": "Ada", "text": "hi", "created_at": "2024-01-01T00:00:00Z"},
            {"id": "legacy", "text": "no name or timestamp"},
        ], fh)
    response = client.get("/comments")
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == ["good"]
