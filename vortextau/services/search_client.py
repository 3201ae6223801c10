"""
Web Search - SerpAPI organic results.

Returns at most three (title, snippet, link) results per query. No retry,
no pagination and no caching; the caller decides what a failure means.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

import httpx

from ..errors import ConfigurationError, RetrievalError
from ..logging_config import log_search

logger = logging.getLogger(__name__)

MAX_RESULTS = 3


@dataclass(frozen=True)
class SearchResult:
    """One organic search hit."""

    title: str
    snippet: str
    link: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchResult":
        return cls(
            title=str(data.get("title") or "").strip(),
            snippet=str(data.get("snippet") or "").strip(),
            link=str(data.get("link") or "").strip(),
        )


def _parse_organic_results(data: Dict[str, Any], limit: int) -> List[SearchResult]:
    organic = data.get("organic_results") or []
    if not isinstance(organic, list):
        raise RetrievalError("Unexpected search response shape", error_type="response")
    return [SearchResult.from_dict(item) for item in organic[:limit] if isinstance(item, dict)]


class SearchClient:
    """Thin SerpAPI client holding the server-side credential."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://serpapi.com/search.json",
        timeout_s: float = 10.0,
        max_results: int = MAX_RESULTS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url
        self.timeout_s = timeout_s
        self.max_results = max(1, min(max_results, MAX_RESULTS))
        self._transport = transport

    def search(self, query: str) -> List[SearchResult]:
        """Run one search.

        Raises:
            ConfigurationError: no API key configured
            RetrievalError: transport failure, non-2xx status, or unreadable body
        """
        if not self.api_key:
            raise ConfigurationError("SERP API key not configured", setting="SERP_API_KEY")

        log_search(logger, "start", query=repr(query[:80]))
        params = {"q": query, "api_key": self.api_key}

        try:
            with httpx.Client(timeout=self.timeout_s, transport=self._transport) as client:
                response = client.get(self.base_url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise RetrievalError(
                "Search service error",
                details=f"Search provider returned status {status}",
                status=status,
                error_type="status",
            ) from e
        except httpx.TimeoutException as e:
            raise RetrievalError("Search service timed out", details=str(e)) from e
        except httpx.RequestError as e:
            raise RetrievalError("Search service unavailable", details=type(e).__name__) from e
        except ValueError as e:
            raise RetrievalError("Search response was not JSON", details=str(e), error_type="response") from e

        if not isinstance(data, dict):
            raise RetrievalError("Unexpected search response shape", error_type="response")

        results = _parse_organic_results(data, self.max_results)
        log_search(logger, "end", results=len(results))
        return results
