"""
VortexTau Chat Router - streaming generation over server-sent events.

POST /chat opens the event stream immediately; fragments are written as the
backend produces them and the stream always ends with `data: [DONE]`.
The completed exchange is recorded after the response has been sent.
"""

import logging
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from starlette.background import BackgroundTask

from ..logging_config import log_message_in
from ..services.generation import GenerationGateway
from ..streaming import SSE_HEADERS
from ..utils.deps import get_generation_gateway

logger = logging.getLogger(__name__)

router = APIRouter()


class Message(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    model: str = Field(..., min_length=1)
    message: str
    history: List[Message] = Field(default_factory=list)
    systemPrompt: Optional[str] = None


@router.post("/chat")
def chat(request: ChatRequest, gateway: GenerationGateway = Depends(get_generation_gateway)):
    """Stream one generation as text/event-stream."""
    log_message_in(
        logger,
        request.message,
        model=request.model,
        history=len(request.history),
        system_prompt="custom" if request.systemPrompt else "default",
    )

    stream = gateway.generate(
        model=request.model,
        system_prompt=request.systemPrompt,
        history=[m.model_dump() for m in request.history],
        user_message=request.message,
    )

    return StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers=SSE_HEADERS,
        background=BackgroundTask(gateway.persist, stream),
    )


@router.get("/chat")
def chat_records(
    model: Optional[str] = Query(default=None),
    gateway: GenerationGateway = Depends(get_generation_gateway),
) -> Dict[str, List[Dict[str, str]]]:
    """Return the recorded exchanges, optionally for one model."""
    return gateway.list_records(model)
