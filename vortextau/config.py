"""
Runtime Configuration for VortexTau.

Provides a singleton RuntimeConfig class whose values default from the
environment.

Usage:
    from vortextau.config import runtime_config
    url = runtime_config.ollama_url
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant. Provide clear and concise responses to user queries."


def _first_env(*keys: str, default: str) -> str:
    """Return the first non-empty environment value from keys, else default."""
    for key in keys:
        value = os.environ.get(key, "").strip()
        if value:
            return value
    return default


def _data_dir_default() -> str:
    return _first_env("VORTEXTAU_DATA_DIR", default=str(Path.cwd() / "data"))


@dataclass
class RuntimeConfig:
    """
    Singleton configuration for the service, client and CLI.

    All values default from environment variables when the process starts.
    """

    # Model backend (Ollama, OpenAI-compatible API under /v1)
    ollama_url: str = field(
        default_factory=lambda: _first_env("OLLAMA_URL", "OLLAMA_HOST", default="http://localhost:11434").rstrip("/")
    )
    llm_timeout: float = field(default_factory=lambda: float(os.environ.get("LLM_TIMEOUT", "180")))
    default_model: str = field(
        default_factory=lambda: os.environ.get("VORTEXTAU_DEFAULT_MODEL", "0xroyce/plutus:latest")
    )
    model_namespace: str = field(
        default_factory=lambda: os.environ.get("VORTEXTAU_MODEL_NAMESPACE", "0xroyce/")
    )  # Only models under this prefix are listed
    default_system_prompt: str = field(
        default_factory=lambda: os.environ.get("VORTEXTAU_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT)
    )

    # Web search (SerpAPI)
    serp_api_key: str = field(default_factory=lambda: os.environ.get("SERP_API_KEY", "").strip())
    serp_api_url: str = field(
        default_factory=lambda: os.environ.get("SERP_API_URL", "https://serpapi.com/search.json").strip()
    )
    search_timeout_s: float = field(default_factory=lambda: float(os.environ.get("SEARCH_TIMEOUT_S", "10")))
    search_max_results: int = field(default_factory=lambda: int(os.environ.get("SEARCH_MAX_RESULTS", "3")))

    # Server-side storage
    data_dir: str = field(default_factory=_data_dir_default)
    chat_storage_file: str = field(default_factory=lambda: os.environ.get("CHAT_STORAGE_FILE", "chat-storage.json"))
    shared_chats_subdir: str = field(default_factory=lambda: os.environ.get("SHARED_CHATS_SUBDIR", "shared-chats"))

    # Logging
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper())
    log_file: str = field(default_factory=lambda: os.environ.get("LOG_FILE", "").strip())  # Empty = stdout only

    # Turn pipeline
    max_input_length: int = field(default_factory=lambda: int(os.environ.get("MAX_INPUT_LENGTH", "5000")))
    classifier_cache_ttl_s: float = field(
        default_factory=lambda: float(os.environ.get("CLASSIFIER_CACHE_TTL_S", "300"))
    )
    retrieval_strategy: str = field(
        default_factory=lambda: os.environ.get("RETRIEVAL_STRATEGY", "classifier").strip().lower()
    )  # "classifier" (canonical), "keyword" (legacy heuristic) or "off"

    # Client
    api_base_url: str = field(
        default_factory=lambda: os.environ.get("VORTEXTAU_API_URL", "http://localhost:3000").rstrip("/")
    )
    client_storage_path: str = field(
        default_factory=lambda: os.environ.get(
            "VORTEXTAU_CLIENT_STORAGE", str(Path.home() / ".vortextau" / "chats.json")
        )
    )
    client_storage_key: str = field(default_factory=lambda: os.environ.get("VORTEXTAU_STORAGE_KEY", "vortextau-chats"))

    # Server
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT", "3000")))

    @property
    def records_path(self) -> Path:
        """Per-model chat record store."""
        return Path(self.data_dir) / self.chat_storage_file

    @property
    def shared_chats_dir(self) -> Path:
        """Directory holding one JSON file per shared chat."""
        return Path(self.data_dir) / self.shared_chats_subdir


# Singleton instance
runtime_config = RuntimeConfig()

