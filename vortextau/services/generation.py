"""
Generation Gateway - relays backend fragments as server-sent events.

One GenerationStream per /chat call:

    Idle -> Streaming -> {Completed | Failed} -> Closed

- Every fragment is encoded and yielded as soon as the backend produces it.
- A backend failure mid-stream yields one generic error event; the cause is
  logged, never sent to the client.
- `data: [DONE]` is the last event on every path the client can still read
  (success, failure, zero fragments). A client disconnect stops the stream
  without it, and the stream still reaches Closed.
- Completed exchanges are appended to the record store by persist(), which
  the router schedules as a background task after the response is sent.
"""

import logging
import time
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence

from ..errors import ParseError, PersistenceError, log_error
from ..logging_config import log_llm, log_message_out
from ..streaming import SSE_DONE, encode_event
from .llm_client import LLMClient, build_messages
from .record_store import ChatRecordStore

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to get response from model"


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"
    CLOSED = "closed"


class GenerationStream:
    """Single-use iterator of SSE strings for one generation call."""

    def __init__(
        self,
        client: LLMClient,
        model: str,
        system_prompt: str,
        history: Sequence[Dict[str, str]],
        user_message: str,
    ):
        self.model = model
        self.user_message = user_message
        self.messages = build_messages(system_prompt, history, user_message)
        self.state = StreamState.IDLE
        self.outcome: Optional[StreamState] = None
        self.error: Optional[str] = None
        self.close_count = 0
        self._client = client
        self._parts: List[str] = []
        self._started = 0.0

    @property
    def full_response(self) -> str:
        return "".join(self._parts)

    @property
    def fragment_count(self) -> int:
        return len(self._parts)

    @property
    def completed(self) -> bool:
        return self.outcome is StreamState.COMPLETED

    def __iter__(self) -> Iterator[str]:
        if self.state is not StreamState.IDLE:
            raise RuntimeError("GenerationStream is not restartable")

        self.state = StreamState.STREAMING
        self._started = time.monotonic()
        log_llm(logger, "start", model=self.model)
        fragments = self._client.stream_chat(self.model, self.messages)

        try:
            try:
                for fragment in fragments:
                    self._parts.append(fragment)
                    yield encode_event({"role": "assistant", "content": fragment})
                self.outcome = StreamState.COMPLETED
            except Exception as e:
                self.outcome = StreamState.FAILED
                self.error = str(e)
                log_error(logger, e, context=f"generate {self.model}")
                yield encode_event({"error": GENERIC_FAILURE_MESSAGE})
        except GeneratorExit:
            if self.outcome is None:
                self.outcome = StreamState.FAILED
                self.error = "client disconnected"
                logger.info(f"Client disconnected after {self.fragment_count} fragments ({self.model})")
            raise
        finally:
            fragments.close()
            self._close()

        yield SSE_DONE

    def _close(self) -> None:
        if self.state is StreamState.CLOSED:
            return
        self.state = StreamState.CLOSED
        self.close_count += 1
        log_llm(logger, "end", model=self.model, duration=time.monotonic() - self._started)
        log_message_out(
            logger,
            chars=len(self.full_response),
            fragments=self.fragment_count,
            status=(self.outcome or StreamState.FAILED).value,
        )


class GenerationGateway:
    """Builds generation streams and persists their completed exchanges."""

    def __init__(self, client: LLMClient, records: ChatRecordStore, default_system_prompt: str):
        self.client = client
        self.records = records
        self.default_system_prompt = default_system_prompt

    def generate(
        self,
        model: str,
        system_prompt: Optional[str],
        history: Sequence[Dict[str, str]],
        user_message: str,
    ) -> GenerationStream:
        """Prepare a stream; nothing is sent to the backend until it is iterated."""
        return GenerationStream(
            self.client,
            model=model,
            system_prompt=system_prompt or self.default_system_prompt,
            history=history,
            user_message=user_message,
        )

    def persist(self, stream: GenerationStream) -> None:
        """Record a completed exchange; failures are logged, never raised."""
        if not stream.completed:
            return
        try:
            self.records.append(stream.model, stream.user_message, stream.full_response)
        except (PersistenceError, ParseError) as e:
            log_error(logger, e, context="records", include_traceback=False)

    def list_records(self, model: Optional[str] = None) -> Dict[str, List[Dict[str, str]]]:
        return self.records.list_records(model)
