"""
VortexTau Services - server-side infrastructure.

- llm_client: OpenAI SDK client for Ollama's compatible API
- generation: SSE relay of backend fragments, record persistence
- record_store: per-model log of completed exchanges (JSON file)
- share_store: one JSON file per shared chat
- search_client: SerpAPI organic results
"""

from .generation import GenerationGateway, GenerationStream, StreamState
from .llm_client import LLMClient, build_messages
from .record_store import ChatRecordStore
from .search_client import SearchClient, SearchResult
from .share_store import ShareStore

__all__ = [
    "GenerationGateway",
    "GenerationStream",
    "StreamState",
    "LLMClient",
    "build_messages",
    "ChatRecordStore",
    "SearchClient",
    "SearchResult",
    "ShareStore",
]
