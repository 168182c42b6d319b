"""Confirmed deletes against a view's article list."""

import inspect
from typing import Awaitable, Callable, Iterable, Optional, Union

from .api import ApiError, log_event
from .content_service import ContentService
from .models import Article

Confirm = Callable[[Article], Union[bool, Awaitable[bool]]]


class ListMutationCoordinator:
    """Owns a displayed article list and removes rows only after the server agrees.

    A failed delete leaves the list as it was and records the error for that
    row. Deletes of different ids may run concurrently; a second delete of an
    id that is already in flight is ignored.
    """

    def __init__(self, service: ContentService, items: Optional[Iterable[Article]] = None):
        self.service = service
        self.items: list[Article] = list(items or [])
        self.errors: dict[str, str] = {}
        self._pending: set[str] = set()

    def reset(self, items: Iterable[Article]) -> None:
        """Replace the list with a fresh result set."""
        self.items = list(items)
        self.errors = {}

    def is_pending(self, article_id: str) -> bool:
        return article_id in self._pending

    def find(self, article_id: str) -> Optional[Article]:
        return next((a for a in self.items if a.id == article_id), None)

    async def delete(self, article_id: str, confirm: Confirm) -> bool:
        """Delete one article after confirmation.

        Args:
            article_id: Row to delete
            confirm: Called with the article; returns (or resolves to) True to proceed

        Returns:
            True if the server deleted the article and the row was removed
        """
        if article_id in self._pending:
            return False

        article = self.find(article_id) or Article(id=article_id)
        self._pending.add(article_id)
        try:
            answer = confirm(article)
            if inspect.isawaitable(answer):
                answer = await answer
            if not answer:
                return False

            self.errors.pop(article_id, None)
            try:
                await self.service.delete(article_id)
            except ApiError as e:
                log_event("delete", f"{article_id} failed: {e.message}")
                self.errors[article_id] = e.message
                return False
        finally:
            self._pending.discard(article_id)

        self.items = [a for a in self.items if a.id != article_id]
        log_event("delete", f"{article_id} removed, {len(self.items)} left")
        return True
