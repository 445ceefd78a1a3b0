import json
import logging
import random
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ai_newsroom.agents.graphic_desk import build_image_url
from ai_newsroom.errors import ModelOutputError
from ai_newsroom.llm.client import LanguageModelClient, parse_json_response
from ai_newsroom.prompts.common import publication_profile, publication_guardrails
from ai_newsroom.schemas.models import Angle, Article, ArticleResponse, SearchResult, AUTHOR_TAG, DEFAULT_TAGS
from ai_newsroom.utils.content import count_words
from ai_newsroom.utils.slugs import generate_article_slug

logger = logging.getLogger(__name__)

# =============================================================================
# PROMPT
# =============================================================================

reporter_write_article_prompt = """You are a Senior AI Journalist.
Write a full news article based on the following research.

{publication_profile}

{publication_guardrails}

Headline: {headline}
Focus: {focus}
Research Data: {research}

<Requirements>
1. **Format**: Return a JSON object with:
   - "title": Final engaging headline
   - "excerpt": 2-sentence summary
   - "content": Full article in Markdown (at least 500 words). Use ## headers.
   - "tags": Array of 3-5 keywords
   - "slug": URL-friendly slug (e.g., "deepseek-v3-release")
2. **Style**: Professional, technical, objective. No fluff.
3. **Images**: Images are handled separately, just write the text.
</Requirements>
"""


def format_research(search_results: List[SearchResult]) -> str:
    """Research data goes into the prompt as indented JSON."""
    return json.dumps([r.model_dump() for r in search_results], indent=2, ensure_ascii=False)


class ArticleWriter:
    """The Reporter: turns one angle plus its search results into an article.

    ``write()`` returns None instead of raising when the model fails or its
    output lacks a title or body.
    """

    def __init__(
        self,
        llm: LanguageModelClient,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.llm = llm
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.rng = rng or random.Random()

    def build_prompt(self, angle: Angle, search_results: List[SearchResult]) -> str:
        return reporter_write_article_prompt.format(
            publication_profile=publication_profile.strip(),
            publication_guardrails=publication_guardrails.strip(),
            headline=angle.title,
            focus=angle.focus,
            research=format_research(search_results),
        )

    def write(self, angle: Angle, search_results: List[SearchResult]) -> Optional[Article]:
        logger.info("-> write_article")
        logger.debug(f"  Angle: {angle.title}")
        logger.debug(f"  Research items: {len(search_results)}")

        try:
            raw = self.llm.complete(self.build_prompt(angle, search_results), json_mode=True)
            draft = parse_json_response(raw, ArticleResponse)
        except ModelOutputError as e:
            logger.error(f"  Writing failed, unusable model output: {e}")
            return None
        except Exception as e:
            logger.error(f"  Writing failed: {e}")
            return None

        if not (draft.title and draft.title.strip()) or not (draft.content and draft.content.strip()):
            logger.error("  Model output is missing a title or content, discarding")
            return None

        return self._build_article(angle, draft, search_results)

    def _build_article(self, angle: Angle, draft: ArticleResponse, search_results: List[SearchResult]) -> Article:
        title = draft.title.strip()

        # Fall back to the angle's headline, not the model's, so the slug does not drift
        slug = generate_article_slug(draft.slug.strip()) if draft.slug and draft.slug.strip() else ""
        if not slug.strip("-"):
            slug = generate_article_slug(angle.title)

        tags = [tag.strip() for tag in draft.tags or [] if tag and tag.strip()] or list(DEFAULT_TAGS)

        article = Article(
            title=title,
            slug=slug,
            excerpt=(draft.excerpt or "").strip(),
            content=draft.content,
            author=AUTHOR_TAG,
            date=self.clock(),
            tags=tags,
            image_url=build_image_url(title, tags, rng=self.rng),
            source_url=search_results[0].url if search_results else None,
        )

        logger.info(f"  Article written: {article.title} ({count_words(article.content)} words)")
        logger.info(f"  Slug: {article.slug}")
        return article
