"""
LLM Client - wraps the OpenAI SDK to talk to Ollama's OpenAI-compatible API.

Streaming: ChatCompletionChunk -> plain text fragments, in arrival order.
Model listing uses Ollama's native /api/tags, which carries the model
metadata (parameter size, quantization) that /v1/models does not.

Errors from the SDK are translated to GenerationError so callers deal with
one exception type regardless of where the stream broke.
"""

import logging
from typing import Any, Dict, Generator, List, Optional, Sequence

import httpx
import openai
from openai import OpenAI

from ..errors import GenerationError

logger = logging.getLogger(__name__)


def build_messages(system_prompt: str, history: Sequence[Dict[str, str]], user_message: str) -> List[Dict[str, str]]:
    """Assemble the message sequence for one stateless backend call.

    Order is fixed: system prompt, prior history as given, new user message.
    """
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend({"role": m["role"], "content": m["content"]} for m in history)
    messages.append({"role": "user", "content": user_message})
    return messages


class LLMClient:
    """Wraps OpenAI SDK pointing at an Ollama instance."""

    def __init__(self, base_url: str, timeout: float = 180.0):
        """
        Args:
            base_url: Ollama URL (e.g., "http://localhost:11434")
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._openai = OpenAI(
            base_url=f"{self.base_url}/v1",
            api_key="ollama",  # Ollama ignores the key but the SDK requires one
            timeout=timeout,
        )

    def is_healthy(self, timeout: float = 3.0) -> bool:
        """Sync health check against Ollama's version endpoint."""
        try:
            resp = httpx.get(f"{self.base_url}/api/version", timeout=timeout)
            return resp.status_code == 200
        except httpx.HTTPError:
            return False

    def stream_chat(
        self,
        model: str,
        messages: List[Dict[str, str]],
        options: Optional[Dict[str, Any]] = None,
    ) -> Generator[str, None, None]:
        """Stream a chat completion, yielding non-empty text fragments.

        Args:
            model: Backend model identifier
            messages: Full message sequence (see build_messages)
            options: Generation options (temperature, top_p, max_tokens)

        Raises:
            GenerationError: connection failure, API error, or a broken stream
        """
        options = options or {}
        kwargs: Dict[str, Any] = {"model": model, "messages": messages}
        for key in ("temperature", "top_p", "max_tokens"):
            if key in options:
                kwargs[key] = options[key]

        try:
            stream = self._openai.chat.completions.create(stream=True, **kwargs)
            for chunk in stream:
                delta = chunk.choices[0].delta if chunk.choices else None
                if delta is None or not delta.content:
                    continue
                yield delta.content
        except openai.APIConnectionError as e:
            raise GenerationError(
                "Model backend unreachable", details=str(e), model=model, error_type="unavailable"
            ) from e
        except openai.APIError as e:
            raise GenerationError("Model backend error", details=str(e), model=model) from e
        except httpx.HTTPError as e:
            raise GenerationError("Model stream interrupted", details=str(e), model=model) from e

    def list_models(self, prefix: str = "") -> List[Dict[str, Any]]:
        """List installed models, optionally filtered by a name prefix.

        Returns:
            Ollama model dicts (name, size, details{parameter_size, quantization_level}, ...)

        Raises:
            GenerationError: backend unreachable or bad response
        """
        try:
            resp = httpx.get(f"{self.base_url}/api/tags", timeout=10.0)
            resp.raise_for_status()
            models = resp.json().get("models", [])
        except (httpx.HTTPError, ValueError) as e:
            raise GenerationError("Failed to fetch models", details=str(e), error_type="unavailable") from e

        if prefix:
            models = [m for m in models if str(m.get("name", "")).startswith(prefix)]
        return models
