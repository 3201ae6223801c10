"""
Shared pytest fixtures: fake model backend, temp stores, SSE helpers.
"""

import json

import httpx
import pytest

from vortextau.errors import GenerationError
from vortextau.services.generation import GenerationGateway
from vortextau.services.record_store import ChatRecordStore


class FakeLLMClient:
    """Stands in for LLMClient: yields canned fragments, optionally fails mid-stream."""

    def __init__(self, fragments=("Hello", ", ", "world"), fail_after=None, models=None, healthy=True):
        self.fragments = list(fragments)
        self.fail_after = fail_after
        self.models = models or []
        self.healthy = healthy
        self.calls = []
        self.closed = 0

    def stream_chat(self, model, messages, options=None):
        self.calls.append({"model": model, "messages": messages})
        try:
            for i, fragment in enumerate(self.fragments):
                if self.fail_after is not None and i >= self.fail_after:
                    raise GenerationError("Model stream interrupted", details="connection reset", model=model)
                yield fragment
            if self.fail_after is not None and self.fail_after >= len(self.fragments):
                raise GenerationError("Model stream interrupted", model=model)
        finally:
            self.closed += 1

    def list_models(self, prefix=""):
        self.calls.append({"list_models": prefix})
        return [m for m in self.models if m["name"].startswith(prefix)]

    def is_healthy(self, timeout=3.0):
        return self.healthy


def split_events(body: str):
    """Split an SSE body into its `data: ...` payload strings."""
    return [chunk[len("data: "):] for chunk in body.split("\n\n") if chunk.startswith("data: ")]


def sse_body(*payloads, done=True) -> str:
    """Build an SSE body from payload dicts (strings are written verbatim)."""
    events = [f"data: {p if isinstance(p, str) else json.dumps(p)}\n\n" for p in payloads]
    if done:
        events.append("data: [DONE]\n\n")
    return "".join(events)


@pytest.fixture
def fake_llm():
    """Factory for FakeLLMClient instances."""
    return FakeLLMClient


@pytest.fixture
def record_store(tmp_path):
    return ChatRecordStore(tmp_path / "chat-storage.json")


@pytest.fixture
def make_gateway(record_store):
    def _make(client):
        return GenerationGateway(client=client, records=record_store, default_system_prompt="You are a test assistant.")

    return _make


@pytest.fixture
def events():
    return split_events


@pytest.fixture
def sse():
    return sse_body


@pytest.fixture
def sse_response():
    """Build an httpx.Response carrying an event stream."""

    def _make(*payloads, done=True, status_code=200):
        return httpx.Response(
            status_code,
            text=sse_body(*payloads, done=done),
            headers={"content-type": "text/event-stream"},
        )

    return _make
