"""Singleton service accessors built from runtime_config.

Routers take these through FastAPI's Depends(); tests swap them with
app.dependency_overrides.
"""

import logging
from typing import Optional

from ..config import runtime_config
from ..services.generation import GenerationGateway
from ..services.llm_client import LLMClient
from ..services.record_store import ChatRecordStore
from ..services.search_client import SearchClient
from ..services.share_store import ShareStore

logger = logging.getLogger(__name__)

_llm_client: Optional[LLMClient] = None
_record_store: Optional[ChatRecordStore] = None
_share_store: Optional[ShareStore] = None
_gateway: Optional[GenerationGateway] = None


def get_llm_client() -> LLMClient:
    """Get the model backend client."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient(base_url=runtime_config.ollama_url, timeout=runtime_config.llm_timeout)
        logger.debug(f"LLM client created for {runtime_config.ollama_url}")
    return _llm_client


def get_record_store() -> ChatRecordStore:
    global _record_store
    if _record_store is None:
        _record_store = ChatRecordStore(runtime_config.records_path)
    return _record_store


def get_share_store() -> ShareStore:
    global _share_store
    if _share_store is None:
        _share_store = ShareStore(runtime_config.shared_chats_dir)
    return _share_store


def get_search_client() -> SearchClient:
    """Build a search client per call; it holds no connection state."""
    return SearchClient(
        api_key=runtime_config.serp_api_key,
        base_url=runtime_config.serp_api_url,
        timeout_s=runtime_config.search_timeout_s,
        max_results=runtime_config.search_max_results,
    )


def get_generation_gateway() -> GenerationGateway:
    global _gateway
    if _gateway is None:
        _gateway = GenerationGateway(
            client=get_llm_client(),
            records=get_record_store(),
            default_system_prompt=runtime_config.default_system_prompt,
        )
    return _gateway

