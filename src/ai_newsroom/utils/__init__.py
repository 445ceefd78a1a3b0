"""Utilities for the AI Newsroom."""

from ai_newsroom.utils.slugs import generate_article_slug
from ai_newsroom.utils.rate_limit import RateLimiter, FixedDelay, FixedIntervalGate
from ai_newsroom.utils.newsroom_logging import setup_logging

__all__ = [
    "generate_article_slug",
    "RateLimiter",
    "FixedDelay",
    "FixedIntervalGate",
    "setup_logging",
]
