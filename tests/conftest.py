import json
from datetime import datetime, timezone
from typing import List, Optional

import pytest

from ai_newsroom.schemas.models import Angle, Article, SearchResult


class FakeLLM:
    """Stands in for LanguageModelClient: replays canned responses in order.

    A response that is an Exception instance is raised instead of returned.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.prompts: List[str] = []
        self.json_modes: List[bool] = []

    def complete(self, prompt: str, json_mode: bool = False) -> str:
        self.prompts.append(prompt)
        self.json_modes.append(json_mode)
        if not self.responses:
            raise AssertionError("FakeLLM ran out of responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, (dict, list)):
            return json.dumps(response)
        return response


class FakeSearch:
    def __init__(self, results: Optional[List[SearchResult]] = None, error: Optional[Exception] = None):
        self.results = results
        self.error = error
        self.queries: List[str] = []

    def search(self, query: str) -> List[SearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        if self.results is not None:
            return self.results
        return [SearchResult(title=f"About {query}", url=f"https://news.example.com/{len(self.queries)}", snippet="Facts.")]


class FakeTavilyClient:
    def __init__(self, response=None, error: Optional[Exception] = None):
        self.response = response if response is not None else {"results": []}
        self.error = error
        self.calls = []

    def search(self, query, **kwargs):
        self.calls.append((query, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


class RecordingLimiter:
    def __init__(self, allow: bool = True):
        self.allow = allow
        self.calls = 0

    def wait(self, cancel_event=None) -> bool:
        self.calls += 1
        return self.allow


def make_article(slug: str = "test-article", content: str = "Body text.", date: Optional[datetime] = None, **kwargs) -> Article:
    return Article(
        title=kwargs.pop("title", "Test Article"),
        slug=slug,
        content=content,
        date=date or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2025, 3, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def angle() -> Angle:
    return Angle(title="X", search_query="x news", focus="Y")


@pytest.fixture
def search_results() -> List[SearchResult]:
    return [
        SearchResult(title="First", url="https://first.example.com/story", snippet="First snippet"),
        SearchResult(title="Second", url="https://second.example.com/story", snippet="Second snippet"),
    ]
