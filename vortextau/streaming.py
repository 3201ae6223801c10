"""
VortexTau Streaming - server-sent event encoding and decoding.

Wire format (one event per fragment, JSON payload):
    data: {"role": "assistant", "content": "Hel"}\n\n
    data: {"error": "Failed to get response from model"}\n\n
    data: [DONE]\n\n

The server side encodes with encode_event()/SSE_DONE; the client side feeds
response text through aiter_sse_lines() and aiter_events().
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

from .errors import ParseError

logger = logging.getLogger(__name__)

SSE_PREFIX = "data: "
DONE_MARKER = "[DONE]"
SSE_DONE = f"{SSE_PREFIX}{DONE_MARKER}\n\n"

# Event streams end lines with CRLF, LF or CR only. U+2028, U+2029 and
# U+0085 are ordinary characters inside a payload.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")

SSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # nginx: flush every event
}


def encode_event(payload: Dict[str, Any]) -> str:
    """Encode one JSON payload as a single SSE event."""
    return f"{SSE_PREFIX}{json.dumps(payload, ensure_ascii=False)}\n\n"


@dataclass(frozen=True)
class StreamEvent:
    """One decoded event: a fragment, an error marker, or the end marker."""

    kind: str  # "fragment" | "error" | "done"
    content: str = ""
    role: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.kind == "done"


def parse_sse_line(line: str) -> Optional[StreamEvent]:
    """Decode one line of an event stream.

    Blank lines and non-data fields (comments, `event:`, `id:`) return None.

    Raises:
        ParseError: data line whose payload is not a JSON object
    """
    line = line.rstrip("\r\n")
    if not line.startswith(SSE_PREFIX):
        return None

    data = line[len(SSE_PREFIX):]
    if data == DONE_MARKER:
        return StreamEvent(kind="done")

    try:
        payload = json.loads(data)
    except json.JSONDecodeError as e:
        raise ParseError("Malformed stream event", details=str(e), source="stream") from e

    if not isinstance(payload, dict):
        raise ParseError("Stream event is not an object", source="stream")

    if "error" in payload:
        return StreamEvent(kind="error", content=str(payload.get("error") or ""))

    return StreamEvent(kind="fragment", content=payload.get("content") or "", role=payload.get("role"))


async def aiter_events(lines: AsyncIterator[str]) -> AsyncIterator[StreamEvent]:
    """Decode an async line iterator such as aiter_sse_lines().

    Stops after the end marker; anything the server writes past it is ignored.
    """
    async for line in lines:
        event = parse_sse_line(line)
        if event is None:
            continue
        yield event
        if event.is_done:
            return


async def aiter_sse_lines(chunks: AsyncIterator[str]) -> AsyncIterator[str]:
    """Split decoded response text (e.g. httpx Response.aiter_text()) into lines.

    httpx's aiter_lines() also breaks on Unicode line separators, which can
    appear unescaped inside a JSON payload and would cut an event in half.
    """
    buffer = ""
    async for chunk in chunks:
        buffer += chunk
        while True:
            match = _LINE_BREAK.search(buffer)
            if match is None:
                break
            # A trailing CR may be the first half of a CRLF split across chunks.
            if match.group() == "\r" and match.end() == len(buffer):
                break
            yield buffer[:match.start()]
            buffer = buffer[match.end():]
    if buffer.endswith("\r"):
        buffer = buffer[:-1]
    if buffer:
        yield buffer
