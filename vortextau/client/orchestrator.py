"""
Turn Orchestrator - drives one user turn end to end.

    validate -> commit user message -> classify -> [search] -> stream -> commit reply

The user message is committed before any network call. While the reply
streams it grows in `in_progress`, separate from committed messages, and is
committed only when the stream ends cleanly. A failure leaves the user
message in place, commits nothing else, and sets `error`.
"""

import logging
from typing import Callable, List, Optional, Sequence

from ..errors import ConfigurationError, RetrievalError, ValidationError, log_error
from ..logging_config import log_message_in, log_search
from ..services.search_client import SearchResult
from ..validation import MAX_INPUT_LENGTH, validate_user_text
from .api import GENERATION_FAILED, ChatAPI
from .chat_store import Chat, ChatStore, Message

logger = logging.getLogger(__name__)

SEARCH_CONTEXT_INTRO = "Here is some current information about the topic:"


def build_augmented_prompt(user_text: str, results: Sequence[SearchResult]) -> str:
    """Embed search evidence and ask for an answer drawn only from it."""
    evidence = "\n".join(f"Source: {r.title}\n{r.snippet}\n" for r in results)
    return (
        f"{SEARCH_CONTEXT_INTRO}\n\n{evidence}\n\n"
        "Based ONLY on the information provided above (not your existing knowledge), "
        f"provide a clear and concise answer to this question: {user_text}. "
        "Format the response as a direct answer without mentioning the sources "
        "or that you're using provided information."
    )


class TurnOrchestrator:
    """Runs chat turns against one ChatStore, one turn at a time."""

    def __init__(
        self,
        api: ChatAPI,
        store: ChatStore,
        model: str,
        classifier=None,
        system_prompt: Optional[str] = None,
        max_input_length: int = MAX_INPUT_LENGTH,
        on_fragment: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            api: Service client
            store: Chat store the turn commits to
            model: Backend model id for generation and classification
            classifier: Object with async classify(query, model); None disables search
            system_prompt: Optional system prompt; the service default applies otherwise
            max_input_length: Maximum user text length in code points
            on_fragment: Called with each fragment as it arrives
        """
        self.api = api
        self.store = store
        self.model = model
        self.classifier = classifier
        self.system_prompt = system_prompt
        self.max_input_length = max_input_length
        self.on_fragment = on_fragment

        self.in_progress: Optional[str] = None
        self.error: Optional[str] = None
        self.last_prompt: Optional[str] = None

    @property
    def is_streaming(self) -> bool:
        return self.in_progress is not None

    async def handle_turn(self, user_text: str, chat_id: Optional[str] = None) -> Chat:
        """Run one turn and return the chat as committed.

        Raises:
            ValidationError: empty or oversized text, or a turn already in flight.
                Nothing is sent and the store is unchanged.
        """
        if self.is_streaming:
            raise ValidationError("A response is still streaming", parameter="message")
        text = validate_user_text(user_text, self.max_input_length)

        self.error = None
        chat = self._target_chat(chat_id)
        history = [m.to_dict() for m in chat.messages]
        chat = self.store.append(chat.id, Message(role="user", content=text))
        log_message_in(logger, text, model=self.model, chat=chat.id, history=len(history))

        try:
            prompt = await self._effective_prompt(text)
            self.last_prompt = prompt

            self.in_progress = ""
            async for fragment in self.api.stream_chat(self.model, prompt, history, self.system_prompt):
                self.in_progress += fragment
                if self.on_fragment is not None:
                    self.on_fragment(fragment)

            reply = Message(role="assistant", content=self.in_progress)
            self.in_progress = None
            return self.store.append(chat.id, reply)
        except Exception as e:
            log_error(logger, e, context=f"turn {chat.id}")
            self.in_progress = None
            self.error = GENERATION_FAILED
            return self.store.get(chat.id)

    def _target_chat(self, chat_id: Optional[str]) -> Chat:
        if chat_id is not None:
            return self.store.select(chat_id)
        return self.store.active or self.store.create()

    async def _effective_prompt(self, text: str) -> str:
        if self.classifier is None:
            return text
        if not await self.classifier.classify(text, model=self.model):
            return text

        results = await self._search(text)
        if not results:
            logger.info("No search results, answering without them")
            return text
        return build_augmented_prompt(text, results)

    async def _search(self, text: str) -> List[SearchResult]:
        log_search(logger, "start", query=repr(text[:80]))
        try:
            results = await self.api.search(text)
        except (ConfigurationError, RetrievalError) as e:
            log_error(logger, e, context="search", include_traceback=False)
            return []
        log_search(logger, "end", results=len(results))
        return results
