"""
VortexTau Share Router - publish a chat snapshot under a random id.

Shared chats are stored as data/shared-chats/<shareId>.json and are
read-only once written.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..errors import NotFoundError, ValidationError, success_response
from ..services.share_store import ShareStore
from ..utils.deps import get_share_store
from .chat import Message

logger = logging.getLogger(__name__)

router = APIRouter()


class SharedChat(BaseModel):
    id: str
    title: str
    messages: List[Message] = Field(default_factory=list)


@router.post("/share-chat")
def share_chat(chat: SharedChat, store: ShareStore = Depends(get_share_store)):
    share_id = store.save(chat.model_dump())
    return success_response(shareId=share_id)


@router.get("/shared-chat/{share_id}")
def get_shared_chat(share_id: str, store: ShareStore = Depends(get_share_store)) -> Dict[str, Any]:
    """Return a shared chat, 404 when the id is unknown or malformed."""
    try:
        return store.load(share_id)
    except ValidationError as e:
        raise NotFoundError("Shared chat not found", resource_type="shared_chat", resource_id=share_id) from e
