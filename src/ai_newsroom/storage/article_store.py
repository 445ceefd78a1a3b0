"""Durable storage for generated articles.

Articles are keyed by slug: storing an article whose slug already exists
replaces the old record. The JSON store keeps the whole collection in one
file and rewrites it atomically, so a reader never sees a half-written file.
"""

import json
import logging
import os
import tempfile
import threading
import weakref
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from ai_newsroom.schemas.models import Article

logger = logging.getLogger(__name__)

# One writer lock per store file within this process, alive while a store uses it
_PATH_LOCKS: "weakref.WeakValueDictionary[Path, threading.Lock]" = weakref.WeakValueDictionary()
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(path, threading.Lock())


def _date_sort_key(article: Article) -> datetime:
    if article.date.tzinfo is None:
        return article.date.replace(tzinfo=timezone.utc)
    return article.date


def _slug_of(entry: Any) -> Optional[str]:
    if isinstance(entry, Article):
        return entry.slug
    if isinstance(entry, dict):
        return entry.get("slug")
    return None


def sort_newest_first(articles: List[Article]) -> List[Article]:
    """Sort by date descending; equal dates keep their storage order."""
    return sorted(articles, key=_date_sort_key, reverse=True)


def upsert_by_slug(articles: List[Any], article: Article) -> List[Any]:
    """Return ``articles`` with ``article`` replacing any record that shares its slug."""
    for i, existing in enumerate(articles):
        if _slug_of(existing) == article.slug:
            articles[i] = article
            return articles
    articles.append(article)
    return articles


class ArticleStore:
    """Keyed persistence for articles."""

    def upsert(self, article: Article) -> None:
        raise NotImplementedError

    def list_all(self) -> List[Article]:
        raise NotImplementedError

    def get_by_slug(self, slug: str) -> Optional[Article]:
        raise NotImplementedError


class InMemoryArticleStore(ArticleStore):
    """Process-local store with the same contract as the JSON store."""

    def __init__(self, articles: Optional[List[Article]] = None):
        self._articles: List[Article] = []
        self._lock = threading.Lock()
        for article in articles or []:
            self.upsert(article)

    def upsert(self, article: Article) -> None:
        with self._lock:
            upsert_by_slug(self._articles, article.model_copy(deep=True))

    def list_all(self) -> List[Article]:
        with self._lock:
            return sort_newest_first([a.model_copy(deep=True) for a in self._articles])

    def get_by_slug(self, slug: str) -> Optional[Article]:
        with self._lock:
            for article in self._articles:
                if article.slug == slug:
                    return article.model_copy(deep=True)
        return None


class JsonArticleStore(ArticleStore):
    """Stores all articles as a JSON array in a single file.

    Every upsert re-reads the file, applies the change and writes the full
    collection back through a temporary file and ``os.replace``. A missing
    file, or one that is not a JSON array, is treated as an empty store.
    Records that fail validation are hidden from readers but written back
    unchanged, so one bad record never costs the rest of the collection.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = _lock_for(self.path.resolve())

    def _load(self) -> List[Any]:
        """Entries in storage order: ``Article`` objects, or the raw JSON of invalid records.

        Raises:
            OSError: the file exists but could not be read
        """
        if not self.path.exists():
            return []
        raw = self.path.read_bytes()
        try:
            records = json.loads(raw)
        except ValueError as e:
            logger.error(f"Failed to parse news store {self.path}: {e}")
            return []
        if not isinstance(records, list):
            logger.error(f"News store {self.path} does not hold a JSON array, ignoring it")
            return []

        entries: List[Any] = []
        for i, record in enumerate(records):
            try:
                entries.append(Article.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping invalid record {i} in {self.path}: {e}")
                entries.append(record)
        return entries

    def _read(self) -> List[Article]:
        try:
            entries = self._load()
        except OSError as e:
            logger.error(f"Failed to read news store {self.path}: {e}")
            return []
        return [entry for entry in entries if isinstance(entry, Article)]

    def _write(self, entries: List[Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        records = [
            entry.model_dump(mode="json", by_alias=True) if isinstance(entry, Article) else entry
            for entry in entries
        ]
        payload = json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def upsert(self, article: Article) -> None:
        # An unreadable file raises here instead of being overwritten
        with self._lock:
            entries = self._load()
            upsert_by_slug(entries, article)
            self._write(entries)
        logger.debug(f"  Stored '{article.slug}' in {self.path}")

    def list_all(self) -> List[Article]:
        return sort_newest_first(self._read())

    def get_by_slug(self, slug: str) -> Optional[Article]:
        for article in self._read():
            if article.slug == slug:
                return article
        return None


def list_articles(store: ArticleStore) -> List[Article]:
    """Read API for the site: every article, newest first."""
    return store.list_all()


def get_article(store: ArticleStore, slug: str) -> Optional[Article]:
    """Read API for the site: one article by slug, or None."""
    return store.get_by_slug(slug)
