"""
Tavily web search tool for the AI Newsroom.

This module wraps the Tavily search API for the Reporter's research step.
Search never fails outwardly: provider errors degrade to a single placeholder
result so the Reporter always has some research data to reference.
"""

import logging
from typing import Any, List, Optional

from tavily import TavilyClient

from ai_newsroom.errors import ConfigurationError
from ai_newsroom.schemas.models import SearchResult

logger = logging.getLogger(__name__)

MAX_RESULTS = 5
SEARCH_TIMEOUT = 60

FALLBACK_RESULT = SearchResult(
    title="AI Industry Overview",
    url="https://example.com",
    snippet="The AI industry continues to evolve rapidly with new developments in models, hardware, and applications.",
)


class WebSearchClient:
    """Bounded, recent-news web search.

    Args:
        api_key: Tavily API key. Ignored when ``client`` is given.
        client: Anything with a Tavily-style ``search(query, **kwargs) -> dict``.
    """

    def __init__(self, api_key: Optional[str] = None, client: Any = None):
        self._api_key = api_key
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self._api_key:
                raise ConfigurationError("TAVILY_API_KEY environment variable is not set")
            self._client = TavilyClient(api_key=self._api_key)
        return self._client

    def search(self, query: str) -> List[SearchResult]:
        """Search recent news for ``query``; returns 1 to 5 results."""
        logger.info(f"  Searching for: {query}")
        try:
            resp = self._get_client().search(
                query,
                topic="news",
                time_range="day",
                max_results=MAX_RESULTS,
                timeout=SEARCH_TIMEOUT,
            )
            results = [
                SearchResult(
                    title=r.get("title") or "",
                    url=r.get("url") or "",
                    snippet=r.get("content") or "",
                )
                for r in resp.get("results", [])[:MAX_RESULTS]
                if r.get("url")
            ]
        except Exception as e:
            logger.warning(f"  Search failed for '{query}': {e}")
            return [FALLBACK_RESULT.model_copy()]

        if not results:
            logger.warning(f"  No results for '{query}', using fallback context")
            return [FALLBACK_RESULT.model_copy()]

        return results


if __name__ == "__main__":
    from ai_newsroom.config import NewsroomConfig
    from ai_newsroom.utils.newsroom_logging import setup_logging

    setup_logging()
    config = NewsroomConfig.from_env()

    print("--- Testing Search ---")
    results = WebSearchClient(api_key=config.tavily_api_key).search("latest LLM releases")
    print(f"Found {len(results)} results")
    for r in results:
        print(f"- {r.title} ({r.url})")
