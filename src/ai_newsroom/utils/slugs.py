"""Utilities for generating article slugs."""

import re

_NON_ALNUM_RUN = re.compile(r'[^a-z0-9]+')


def generate_article_slug(title: str) -> str:
    """Generate a URL-safe slug from a headline.

    Lowercases the title and replaces every run of non-alphanumeric
    characters with a single hyphen. Leading and trailing hyphens are kept.

    Example:
        >>> generate_article_slug("GPU Wars: NVIDIA vs AMD")
        'gpu-wars-nvidia-vs-amd'
    """
    return _NON_ALNUM_RUN.sub('-', title.lower())
