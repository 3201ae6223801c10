"""
VortexTau API client - talks to the service over its HTTP surface only.

Streaming reads are a cooperative loop over response lines: each fragment is
yielded as soon as its event is decoded. Errors surface as VortexError
subclasses so callers never handle httpx exceptions directly.
"""

import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import httpx

from ..errors import (
    ConfigurationError,
    ErrorCode,
    GenerationError,
    NotFoundError,
    PersistenceError,
    RetrievalError,
)
from ..services.search_client import SearchResult
from ..streaming import aiter_events, aiter_sse_lines

logger = logging.getLogger(__name__)

GENERATION_FAILED = "Failed to get response from model"


def pick_default_model(models: Sequence[Dict[str, Any]], preferred: str) -> Optional[str]:
    """Preferred model when installed, else the first listed, else None."""
    names = [m.get("name") for m in models if m.get("name")]
    if preferred in names:
        return preferred
    return names[0] if names else None


class ChatAPI:
    """Async client for the VortexTau HTTP API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 180.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: Service root (e.g., "http://localhost:3000")
            timeout: Per-request timeout in seconds
            transport: Optional transport override (httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def stream_chat(
        self,
        model: str,
        message: str,
        history: Sequence[Dict[str, str]],
        system_prompt: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """Yield response fragments in arrival order.

        Raises:
            GenerationError: non-2xx status, error event, transport failure,
                or a stream that ends without the end marker
            ParseError: malformed event
        """
        payload: Dict[str, Any] = {"model": model, "message": message, "history": list(history)}
        if system_prompt:
            payload["systemPrompt"] = system_prompt

        try:
            async with self._client() as client:
                async with client.stream("POST", "/api/chat", json=payload) as response:
                    if response.status_code >= 400:
                        raise GenerationError(
                            GENERATION_FAILED, details=f"status {response.status_code}", model=model
                        )

                    finished = False
                    async for event in aiter_events(aiter_sse_lines(response.aiter_text())):
                        if event.kind == "error":
                            raise GenerationError(event.content or GENERATION_FAILED, model=model)
                        if event.is_done:
                            finished = True
                            break
                        if event.content:
                            yield event.content

                    if not finished:
                        raise GenerationError(
                            GENERATION_FAILED, details="stream ended without end marker", model=model,
                            error_type="truncated",
                        )
        except (httpx.HTTPError, httpx.StreamError) as e:
            raise GenerationError(GENERATION_FAILED, details=str(e), model=model, error_type="unavailable") from e

    async def complete(self, model: str, message: str, system_prompt: Optional[str] = None) -> str:
        """Run a one-shot prompt with empty history and return the full text."""
        parts: List[str] = []
        async for fragment in self.stream_chat(model, message, [], system_prompt):
            parts.append(fragment)
        return "".join(parts)

    async def search(self, query: str) -> List[SearchResult]:
        """Web search through the service.

        Raises:
            ConfigurationError: service has no search credential
            RetrievalError: any other failure
        """
        try:
            async with self._client() as client:
                response = await client.post("/api/search", json={"query": query})
        except httpx.HTTPError as e:
            raise RetrievalError("Search request failed", details=str(e)) from e

        try:
            data = response.json()
        except ValueError as e:
            raise RetrievalError(
                "Search response was not JSON", details=str(e), status=response.status_code, error_type="response"
            ) from e

        if response.status_code >= 400:
            body = data if isinstance(data, dict) else {}
            message = body.get("error") or "Search failed"
            if body.get("code") == ErrorCode.CONFIG_MISSING_CREDENTIAL.value:
                raise ConfigurationError(message, setting="SERP_API_KEY")
            raise RetrievalError(message, status=response.status_code, error_type="status")

        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise RetrievalError("Unexpected search response shape", error_type="response")
        return [SearchResult.from_dict(r) for r in results if isinstance(r, dict)]

    async def list_models(self) -> List[Dict[str, Any]]:
        """Installed models under the service's namespace.

        Raises:
            GenerationError: listing failed
        """
        try:
            async with self._client() as client:
                response = await client.get("/api/models")
                response.raise_for_status()
                models = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationError("Failed to fetch models", details=str(e), error_type="unavailable") from e
        if not isinstance(models, list):
            raise GenerationError("Failed to fetch models", details="unexpected response shape")
        return models

    async def share_chat(self, chat: Dict[str, Any]) -> str:
        """Publish a chat snapshot and return its share id.

        Raises:
            PersistenceError: the service did not store the chat
        """
        try:
            async with self._client() as client:
                response = await client.post("/api/share-chat", json=chat)
                response.raise_for_status()
                share_id = response.json()["shareId"]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            raise PersistenceError("Failed to share chat", details=str(e)) from e
        logger.info(f"Chat {chat.get('id')} shared as {share_id}")
        return share_id

    async def load_shared_chat(self, share_id: str) -> Dict[str, Any]:
        """Fetch a shared chat.

        Raises:
            NotFoundError: unknown share id
            PersistenceError: any other failure
        """
        try:
            async with self._client() as client:
                response = await client.get(f"/api/shared-chat/{share_id}")
                if response.status_code == 404:
                    raise NotFoundError("Shared chat not found", resource_type="shared_chat", resource_id=share_id)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PersistenceError("Failed to load shared chat", details=str(e), operation="read") from e
        if not isinstance(data, dict):
            raise PersistenceError("Failed to load shared chat", details="unexpected response shape", operation="read")
        return data
