"""
VortexTau client - everything that runs on the user's side of the API.

- api: async HTTP client for the service (streaming chat, search, models, sharing)
- classifier: YES/NO retrieval decision with a TTL cache, plus the keyword strategy
- chat_store: chats and messages with mirrored durable/session persistence
- orchestrator: one user turn from validation to committed reply
"""

from .api import ChatAPI, pick_default_model
from .chat_store import Chat, ChatStore, JsonFileStorage, MemoryStorage, Message
from .classifier import ClassificationCache, KeywordClassifier, QueryClassifier, build_classifier
from .orchestrator import TurnOrchestrator, build_augmented_prompt

__all__ = [
    "ChatAPI",
    "pick_default_model",
    "Chat",
    "ChatStore",
    "JsonFileStorage",
    "MemoryStorage",
    "Message",
    "ClassificationCache",
    "KeywordClassifier",
    "QueryClassifier",
    "build_classifier",
    "TurnOrchestrator",
    "build_augmented_prompt",
]
