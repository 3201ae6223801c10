"""
VortexTau - chat backend and client for locally hosted language models.

Server side (FastAPI):
- routers/: HTTP endpoints (/chat, /models, /search, /share-chat)
- services/: LLM client, generation gateway, search, record + share stores

Client side:
- client/: API client, query classifier, chat store, turn orchestrator
"""

__version__ = "0.3.0"
