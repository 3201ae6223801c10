"""
Query classification - does a message need current information from the web?

Strategies (RuntimeConfig.retrieval_strategy):
- "classifier": ask the model backend for a YES/NO verdict, cached per exact
  query text for a short TTL. Any failure answers NO.
- "keyword": legacy substring heuristic, no network.
- "off": never search.
"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from ..errors import ConfigurationError, ErrorCode, VortexError
from .api import ChatAPI

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_S = 300.0

CLASSIFIER_SYSTEM_PROMPT = (
    "You are a query classifier. You answer with exactly one word, YES or NO, and nothing else."
)

CLASSIFIER_PROMPT = """Decide whether answering the question below requires current, time-sensitive information from the internet.

Answer YES for questions about:
- prices of stocks, currencies or products right now
- recent or breaking news
- today's or upcoming weather
- the current status of a person, company, service or event

Answer NO for questions about:
- definitions and explanations of concepts
- history and past events
- scientific or mathematical theory
- math problems and calculations

Question: {query}

Answer with exactly one word: YES or NO."""

LEGACY_KEYWORDS = ("president", "weather", "news", "current", "latest", "today")


class ClassificationCache:
    """Exact-text cache of classifier decisions with a fixed TTL.

    Expired entries read as absent. Not synchronized; one turn runs at a time.
    """

    def __init__(self, ttl_s: float = DEFAULT_CACHE_TTL_S, clock: Callable[[], float] = time.monotonic):
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: Dict[str, Tuple[bool, float]] = {}

    def get(self, query: str) -> Optional[bool]:
        entry = self._entries.get(query)
        if entry is None:
            return None
        decision, stored_at = entry
        if self._clock() - stored_at >= self.ttl_s:
            del self._entries[query]
            return None
        return decision

    def put(self, query: str, decision: bool) -> None:
        self._entries[query] = (decision, self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def parse_verdict(answer: str) -> bool:
    """True only for an exact YES after trimming and uppercasing."""
    return answer.strip().upper() == "YES"


class QueryClassifier:
    """Model-backed YES/NO classifier with a TTL cache."""

    def __init__(self, api: ChatAPI, model: str = "", cache: Optional[ClassificationCache] = None):
        self.api = api
        self.model = model
        self.cache = cache if cache is not None else ClassificationCache()

    async def classify(self, query: str, model: Optional[str] = None) -> bool:
        cached = self.cache.get(query)
        if cached is not None:
            logger.debug(f"Classifier cache hit: {query[:60]!r} -> {cached}")
            return cached

        try:
            answer = await self.api.complete(
                model or self.model,
                CLASSIFIER_PROMPT.format(query=query),
                system_prompt=CLASSIFIER_SYSTEM_PROMPT,
            )
            decision = parse_verdict(answer)
        except VortexError as e:
            logger.warning(f"Classifier failed, answering NO: {e}")
            decision = False
        except Exception as e:
            logger.warning(f"Classifier failed unexpectedly, answering NO: {type(e).__name__}: {e}")
            decision = False

        self.cache.put(query, decision)
        logger.info(f"Classified {query[:60]!r}: {'search' if decision else 'no search'}")
        return decision


class KeywordClassifier:
    """Legacy heuristic: search when the message mentions a time-sensitive keyword."""

    def __init__(self, keywords=LEGACY_KEYWORDS):
        self.keywords = tuple(k.lower() for k in keywords)

    async def classify(self, query: str, model: Optional[str] = None) -> bool:
        lowered = query.lower()
        return any(keyword in lowered for keyword in self.keywords)


def build_classifier(strategy: str, api: ChatAPI, model: str = "", ttl_s: float = DEFAULT_CACHE_TTL_S):
    """Classifier for a retrieval strategy; None means never search."""
    if strategy == "classifier":
        return QueryClassifier(api, model=model, cache=ClassificationCache(ttl_s))
    if strategy == "keyword":
        return KeywordClassifier()
    if strategy == "off":
        return None
    raise ConfigurationError(
        f"Unknown retrieval strategy: {strategy!r}", setting="RETRIEVAL_STRATEGY", code=ErrorCode.CONFIG_INVALID_VALUE
    )
