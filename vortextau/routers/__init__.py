"""
VortexTau HTTP Routers

Mounted under /api by main.py:
- chat: POST /chat (event stream), GET /chat (record store)
- models: GET /models
- search: POST /search
- share: POST /share-chat, GET /shared-chat/{share_id}
"""
