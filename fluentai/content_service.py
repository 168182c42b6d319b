"""Article endpoints as async, stateless operations.

Each operation issues exactly one request in a worker thread and never
retries. Failures raise ApiError; nothing here touches caller state.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from . import api
from .api import ApiError, AuthContext, log_event
from .models import Article, SearchCriteria


def _article_items(data) -> list[dict]:
    """Accept a bare list, {items: [...]} or {articles: [...]}."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("items", "articles"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


def _to_article(data, fallback_message: str) -> Article:
    if not isinstance(data, dict):
        raise ApiError(fallback_message)
    try:
        return Article.from_api(data)
    except ValueError as e:
        raise ApiError(fallback_message) from e


def _to_articles(data) -> list[Article]:
    articles = []
    for item in _article_items(data):
        if not isinstance(item, dict):
            continue
        try:
            articles.append(Article.from_api(item))
        except ValueError as e:
            log_event("content", f"skipping article record: {e}")
    return articles


class ContentService:
    """Async wrapper over /articles."""

    def __init__(self, auth: AuthContext):
        self.auth = auth

    async def _call(self, method: str, path: str, **kwargs):
        return await asyncio.to_thread(api.request, self.auth, method, path, **kwargs)

    async def list(self, criteria: Optional[SearchCriteria] = None) -> list[Article]:
        """GET /articles with search/category/author/limit/page filters."""
        criteria = criteria or SearchCriteria()
        data = await self._call(
            "GET",
            "/articles",
            params=criteria.params(),
            fallback_message="Failed to load articles",
            require_token=False,
        )
        return _to_articles(data)

    async def get(self, article_id: str) -> Article:
        data = await self._call(
            "GET",
            f"/articles/{article_id}",
            fallback_message="Article not found",
            require_token=False,
        )
        return _to_article(data, "Article not found")

    async def similar(self, article_id: str) -> list[Article]:
        """GET /articles/:id/similar."""
        data = await self._call(
            "GET",
            f"/articles/{article_id}/similar",
            fallback_message="Failed to load similar articles",
            require_token=False,
        )
        return _to_articles(data)

    async def create(self, fields: dict) -> Article:
        """POST /articles. Allocates a new id on every call."""
        data = await self._call("POST", "/articles", payload=fields, fallback_message="Failed to save article")
        return _to_article(data, "Failed to save article")

    async def update(self, article_id: str, fields: dict) -> Article:
        data = await self._call(
            "PUT",
            f"/articles/{article_id}",
            payload=fields,
            fallback_message="Failed to save article",
        )
        return _to_article(data, "Failed to save article")

    async def delete(self, article_id: str) -> None:
        await self._call("DELETE", f"/articles/{article_id}", fallback_message="Failed to delete article")
