"""Article, draft and search value types."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional

from bs4 import BeautifulSoup

# Fixed category set offered by the editor
CATEGORIES = (
    "technology",
    "science",
    "business",
    "health",
    "education",
    "lifestyle",
    "other",
)

SUMMARY_MAX_CHARS = 1000


def normalize_tags(tags: str | list[str] | None) -> list[str]:
    """Split a comma-delimited tag string into ordered, unique, trimmed tags.

    "a, b ,b," -> ["a", "b"]
    """
    if not tags:
        return []
    parts = tags.split(",") if isinstance(tags, str) else tags
    seen = set()
    result = []
    for part in parts:
        tag = str(part).strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def html_to_text(content: str | None) -> str:
    """Render rich-text markup as plain text, one block per line."""
    if not content:
        return ""
    soup = BeautifulSoup(content, "html.parser")
    return soup.get_text("\n", strip=True)


def has_text(content: str | None) -> bool:
    """Check whether rich-text markup carries any visible text.

    An empty editor value such as "<p><br></p>" has none.
    """
    return bool(html_to_text(content))


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the API; None if missing or malformed."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _entity_id(value: Any) -> Optional[str]:
    """Get an id from a plain value or an embedded {id|_id} object."""
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("id") or value.get("_id")
        if value is None:
            return None
    return str(value)


@dataclass
class Article:
    """Client copy of a server-owned article. May be stale."""

    id: str
    title: str = ""
    content: str = ""
    summary: str = ""
    category: str = ""
    tags: str = ""
    author_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: dict) -> "Article":
        """Build an Article from an API record (accepts `id` or `_id`)."""
        article_id = _entity_id(data.get("id")) or _entity_id(data.get("_id"))
        if not article_id:
            raise ValueError("article record has no id")

        tags = data.get("tags") or ""
        if isinstance(tags, list):
            tags = ", ".join(str(t.get("name", "")) if isinstance(t, dict) else str(t) for t in tags)

        return cls(
            id=article_id,
            title=data.get("title") or "",
            content=data.get("content") or "",
            summary=data.get("summary") or "",
            category=data.get("category") or "",
            tags=tags,
            author_id=_entity_id(data.get("author")) or _entity_id(data.get("author_id")),
            created_at=parse_timestamp(data.get("created_at") or data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updated_at") or data.get("updatedAt")),
        )

    @property
    def display_tags(self) -> list[str]:
        return normalize_tags(self.tags)

    @property
    def was_updated(self) -> bool:
        """True when the article was edited after creation."""
        if self.created_at is None or self.updated_at is None:
            return False
        try:
            return self.updated_at > self.created_at
        except TypeError:
            # naive vs aware timestamps
            return False


@dataclass
class DraftState:
    """In-progress editable copy of an article's fields."""

    title: str = ""
    content: str = ""
    summary: str = ""
    category: str = ""
    tags: str = ""
    # UI-only, never sent as an article field
    custom_prompt: str = ""

    @classmethod
    def from_article(cls, article: Article) -> "DraftState":
        return cls(
            title=article.title,
            content=article.content,
            summary=article.summary,
            category=article.category,
            tags=article.tags,
        )

    def payload(self) -> dict:
        """Article fields as sent to POST/PUT /articles."""
        return {
            "title": self.title,
            "content": self.content,
            "summary": self.summary,
            "category": self.category,
            "tags": self.tags,
        }

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.title.strip():
            errors.append("Title is required")
        if not has_text(self.content):
            errors.append("Content is required")
        if not self.category.strip():
            errors.append("Category is required")
        elif self.category not in CATEGORIES:
            errors.append(f"Unknown category: {self.category}")
        if len(self.summary) > SUMMARY_MAX_CHARS:
            errors.append(f"Summary is longer than {SUMMARY_MAX_CHARS} characters")
        return errors

    def is_complete(self) -> bool:
        return not self.validation_errors()


@dataclass(frozen=True)
class SearchCriteria:
    """Immutable list filter; a new instance replaces the old on every change."""

    query: str = ""
    category: Optional[str] = None
    author: Optional[str] = None
    limit: Optional[int] = None
    page: Optional[int] = None

    def params(self) -> dict:
        """Non-empty criteria as GET /articles query parameters."""
        params: dict[str, Any] = {}
        if self.query.strip():
            params["search"] = self.query.strip()
        if self.category:
            params["category"] = self.category
        if self.author:
            params["author"] = self.author
        if self.limit:
            params["limit"] = self.limit
        if self.page:
            params["page"] = self.page
        return params

    def with_query(self, query: str) -> "SearchCriteria":
        return replace(self, query=query)

    def with_category(self, category: Optional[str]) -> "SearchCriteria":
        return replace(self, category=category or None)
