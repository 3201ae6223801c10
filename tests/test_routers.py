"""
HTTP surface tests.

Strategy:
    - Build a lightweight FastAPI app per router, mounted under /api like main.py
    - Override service dependencies with fakes or temp-dir stores
    - Use Starlette TestClient; background tasks finish before the call returns
"""

import json
import uuid

import httpx
import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from vortextau.config import runtime_config
from vortextau.errors import GenerationError, install_exception_handlers
from vortextau.middleware import RequestSizeLimitMiddleware
from vortextau.routers import chat, models, search, share
from vortextau.services.search_client import SearchClient
from vortextau.services.share_store import ShareStore
from vortextau.utils.deps import get_generation_gateway, get_llm_client, get_search_client, get_share_store


def _app(router, overrides):
    app = FastAPI()
    install_exception_handlers(app)
    app.include_router(router, prefix="/api")
    app.dependency_overrides.update(overrides)
    return TestClient(app)


# ---------------------------------------------------------------------------
# /api/chat
# ---------------------------------------------------------------------------


class TestChatRouter:
    def test_streams_events_and_records_exchange(self, fake_llm, make_gateway, events):
        gateway = make_gateway(fake_llm(fragments=["Par", "is"]))
        client = _app(chat.router, {get_generation_gateway: lambda: gateway})

        resp = client.post(
            "/api/chat",
            json={"model": "0xroyce/plutus:latest", "message": "Capital of France?", "history": []},
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        assert resp.headers["cache-control"] == "no-cache, no-transform"
        payloads = events(resp.text)
        assert [json.loads(p)["content"] for p in payloads[:-1]] == ["Par", "is"]
        assert payloads[-1] == "[DONE]"

        records = client.get("/api/chat", params={"model": "0xroyce/plutus:latest"}).json()
        assert records["0xroyce/plutus:latest"][0]["response"] == "Paris"

    def test_backend_failure_mid_stream(self, fake_llm, make_gateway, events):
        gateway = make_gateway(fake_llm(fragments=["a", "b", "c"], fail_after=2))
        client = _app(chat.router, {get_generation_gateway: lambda: gateway})

        resp = client.post("/api/chat", json={"model": "m", "message": "hi", "history": []})

        payloads = events(resp.text)
        assert [json.loads(p) for p in payloads[:3]] == [
            {"role": "assistant", "content": "a"},
            {"role": "assistant", "content": "b"},
            {"error": "Failed to get response from model"},
        ]
        assert payloads[3:] == ["[DONE]"]
        assert client.get("/api/chat").json() == {}

    def test_history_and_system_prompt_forwarded(self, fake_llm, make_gateway):
        llm = fake_llm()
        gateway = make_gateway(llm)
        client = _app(chat.router, {get_generation_gateway: lambda: gateway})

        client.post(
            "/api/chat",
            json={
                "model": "m",
                "message": "and Germany?",
                "history": [
                    {"role": "user", "content": "Capital of France?"},
                    {"role": "assistant", "content": "Paris"},
                ],
                "systemPrompt": "Answer in one word.",
            },
        )

        messages = llm.calls[0]["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[0]["content"] == "Answer in one word."
        assert messages[-1]["content"] == "and Germany?"

    def test_invalid_role_rejected(self, fake_llm, make_gateway):
        gateway = make_gateway(fake_llm())
        client = _app(chat.router, {get_generation_gateway: lambda: gateway})
        resp = client.post(
            "/api/chat", json={"model": "m", "message": "hi", "history": [{"role": "tool", "content": "x"}]}
        )
        assert resp.status_code == 422

    def test_get_all_records(self, fake_llm, make_gateway, record_store):
        record_store.append("a", "m", "r")
        gateway = make_gateway(fake_llm())
        client = _app(chat.router, {get_generation_gateway: lambda: gateway})
        assert list(client.get("/api/chat").json()) == ["a"]

    def test_method_not_allowed(self, fake_llm, make_gateway):
        gateway = make_gateway(fake_llm())
        client = _app(chat.router, {get_generation_gateway: lambda: gateway})
        assert client.delete("/api/chat").status_code == 405


# ---------------------------------------------------------------------------
# /api/models
# ---------------------------------------------------------------------------


class TestModelsRouter:
    def test_filters_by_namespace(self, fake_llm, monkeypatch):
        monkeypatch.setattr(runtime_config, "model_namespace", "0xroyce/")
        llm = fake_llm(
            models=[
                {"name": "0xroyce/plutus:latest", "details": {"parameter_size": "8B", "quantization_level": "Q4_0"}},
                {"name": "llama3:8b", "details": {}},
            ]
        )
        client = _app(models.router, {get_llm_client: lambda: llm})

        resp = client.get("/api/models")

        assert resp.status_code == 200
        assert [m["name"] for m in resp.json()] == ["0xroyce/plutus:latest"]
        assert resp.json()[0]["details"]["parameter_size"] == "8B"

    def test_backend_down(self):
        class DownClient:
            def list_models(self, prefix=""):
                raise GenerationError("Failed to fetch models", details="connection refused", error_type="unavailable")

        client = _app(models.router, {get_llm_client: lambda: DownClient()})
        resp = client.get("/api/models")
        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to fetch models"


# ---------------------------------------------------------------------------
# /api/search
# ---------------------------------------------------------------------------


def _search_client(handler, api_key="k"):
    return SearchClient(api_key=api_key, base_url="https://serp.test/search.json", transport=httpx.MockTransport(handler))


class TestSearchRouter:
    def test_results(self):
        body = {"organic_results": [{"title": "T", "snippet": "S", "link": "L", "extra": 1}]}
        sc = _search_client(lambda r: httpx.Response(200, json=body))
        client = _app(search.router, {get_search_client: lambda: sc})

        resp = client.post("/api/search", json={"query": "news today"})

        assert resp.status_code == 200
        assert resp.json() == {"results": [{"title": "T", "snippet": "S", "link": "L"}]}

    def test_missing_credential(self):
        sc = _search_client(lambda r: httpx.Response(200, json={}), api_key="")
        client = _app(search.router, {get_search_client: lambda: sc})

        resp = client.post("/api/search", json={"query": "q"})

        assert resp.status_code == 500
        assert resp.json()["error"] == "SERP API key not configured"
        assert resp.json()["code"] == "CONFIG_MISSING_CREDENTIAL"

    def test_upstream_failure(self):
        sc = _search_client(lambda r: httpx.Response(503))
        client = _app(search.router, {get_search_client: lambda: sc})

        resp = client.post("/api/search", json={"query": "q"})

        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to fetch search results"


# ---------------------------------------------------------------------------
# /api/share-chat, /api/shared-chat/{id}
# ---------------------------------------------------------------------------


class TestShareRouter:
    @pytest.fixture
    def client(self, tmp_path):
        store = ShareStore(tmp_path / "shared-chats")
        return _app(share.router, {get_share_store: lambda: store})

    def test_share_and_fetch(self, client):
        chat_body = {"id": "1", "title": "New Chat", "messages": [{"role": "user", "content": "hi"}]}

        resp = client.post("/api/share-chat", json=chat_body)
        assert resp.status_code == 200
        share_id = resp.json()["shareId"]

        fetched = client.get(f"/api/shared-chat/{share_id}")
        assert fetched.status_code == 200
        assert fetched.json() == chat_body

    def test_unknown_id_is_404(self, client):
        resp = client.get(f"/api/shared-chat/{uuid.uuid4()}")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Shared chat not found"

    def test_malformed_id_is_404(self, client):
        assert client.get("/api/shared-chat/not-a-share-id").status_code == 404


# ---------------------------------------------------------------------------
# Middleware and app-level routes
# ---------------------------------------------------------------------------


class TestRequestSizeLimit:
    def test_oversized_body_rejected(self):
        app = FastAPI()
        app.add_middleware(RequestSizeLimitMiddleware, max_body_size=64)

        @app.post("/echo")
        def echo(body: dict):
            return body

        client = TestClient(app)
        assert client.post("/echo", json={"a": 1}).status_code == 200

        resp = client.post("/echo", json={"a": "x" * 200})
        assert resp.status_code == 413
        assert resp.json()["code"] == "VALIDATION_INPUT_TOO_LONG"


class TestHealth:
    def test_reports_backend_state(self, fake_llm):
        from vortextau.main import app

        app.dependency_overrides[get_llm_client] = lambda: fake_llm(healthy=False)
        try:
            resp = TestClient(app).get("/health")
        finally:
            app.dependency_overrides.clear()

        assert resp.status_code == 200
        assert resp.json()["status"] == "degraded"
        assert resp.json()["checks"]["llm"] == "down"
