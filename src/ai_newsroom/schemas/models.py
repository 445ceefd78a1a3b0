import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ai_newsroom.schemas.base import NewsroomModel

AUTHOR_TAG = "AI Research Agent"
DEFAULT_TAGS = ["AI", "Tech"]


class Angle(NewsroomModel):
    """A story idea from the Editor-in-Chief, consumed once by the Reporter."""
    title: str = Field(..., min_length=1, description="A catchy, specific headline")
    search_query: str = Field(..., min_length=1, alias="query", description="Search query to find facts for the story")
    focus: str = Field("", description="What specific details the journalist should look for")


class SearchResult(BaseModel):
    """A single web search hit handed to the Reporter as research data."""
    title: str
    url: str
    snippet: str


class Article(NewsroomModel):
    """A generated news article, keyed by slug in the store."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    title: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    excerpt: str = ""
    content: str = Field(..., min_length=1, description="Article body in markdown")
    author: str = AUTHOR_TAG
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    tags: List[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))
    image_url: Optional[str] = Field(None, alias="imageUrl")
    source_url: Optional[str] = Field(None, alias="sourceUrl")

    def to_markdown(self) -> str:
        md = f"# {self.title}\n\n"
        md += f"*By {self.author} | {self.date.strftime('%B %d, %Y')}*\n\n"
        if self.tags:
            md += f"**Tags:** {', '.join(self.tags)}\n\n"
        if self.excerpt:
            md += f"> {self.excerpt}\n\n"
        if self.image_url:
            md += f"![{self.title}]({self.image_url})\n\n"
        md += self.content.rstrip() + "\n"
        if self.source_url:
            md += f"\n---\n\nSource: {self.source_url}\n"
        return md


# --- Structured Outputs ---

class AnglesResponse(BaseModel):
    angles: List[Angle]


class ArticleResponse(BaseModel):
    """What the Reporter asks the model for.

    Every field is optional here; the Reporter decides which omissions are fatal.
    """
    title: Optional[str] = None
    excerpt: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    slug: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tag_string(cls, value):
        # Some models answer "AI, Chips, NVIDIA" instead of a list
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value
