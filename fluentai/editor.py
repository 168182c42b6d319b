"""Editor session: one draft from load to settled save.

    Loading (edit only) -> Ready -> Saving -> Enriching -> Success
                                      |
                                      +--> Ready (persist failed, may resubmit)
    Loading -> Error (load failed, terminal)

The primary save and the follow-up summary are separate requests. Anything
that goes wrong after the save succeeded is reported in `notices` and never
undoes the save.
"""

import asyncio
from enum import Enum
from typing import Callable, Optional

from .api import ApiError, log_event
from .content_service import ContentService
from .enrichment_service import EnrichmentService
from .models import Article, DraftState, has_text

LOAD_ERROR = "Failed to load article."
SAVE_ERROR = "Failed to save article"


class EditorState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"
    ENRICHING = "enriching"
    SUCCESS = "success"
    ERROR = "error"


class EditorSession:
    """Owns a DraftState and drives persistence and AI enrichment for it."""

    def __init__(
        self,
        content: ContentService,
        enrichment: EnrichmentService,
        article_id: Optional[str] = None,
        on_settled: Optional[Callable[[Article], None]] = None,
    ):
        self.content = content
        self.enrichment = enrichment
        self.article_id = article_id
        self.on_settled = on_settled
        self.draft = DraftState()
        self.article: Optional[Article] = None
        self.state = EditorState.LOADING if self.is_edit else EditorState.READY
        self.error: Optional[str] = None
        self.notices: list[str] = []
        # Summary generated after save whose patch request failed
        self.unsaved_summary: Optional[str] = None
        self._transform_in_flight = False
        self._transform_done = asyncio.Event()
        self._transform_done.set()

    @property
    def is_edit(self) -> bool:
        return self.article_id is not None

    @property
    def can_submit(self) -> bool:
        return self.state == EditorState.READY and self.draft.is_complete()

    @property
    def can_transform(self) -> bool:
        return (
            self.state == EditorState.READY
            and not self._transform_in_flight
            and has_text(self.draft.content)
        )

    @property
    def transform_in_flight(self) -> bool:
        return self._transform_in_flight

    async def open(self) -> EditorState:
        """Load the article in edit mode; create mode is ready immediately."""
        if not self.is_edit or self.state != EditorState.LOADING:
            return self.state
        try:
            article = await self.content.get(self.article_id)
        except ApiError as e:
            log_event("editor", f"load {self.article_id} failed: {e.message}")
            self.error = LOAD_ERROR
            self.state = EditorState.ERROR
            return self.state

        self.article = article
        self.draft = DraftState.from_article(article)
        self.state = EditorState.READY
        return self.state

    async def submit(self) -> bool:
        """Save the draft, then summarize it if it had no summary.

        Returns:
            True when the session settled successfully. False when the submit
            was refused (not ready / incomplete draft) or the save failed.
        """
        if not self.can_submit:
            return False

        self.state = EditorState.SAVING
        self.error = None
        self.notices = []
        self.unsaved_summary = None
        fields = self.draft.payload()
        needs_summary = not fields["summary"].strip()

        try:
            if self.is_edit:
                saved = await self.content.update(self.article_id, fields)
            else:
                saved = await self.content.create(fields)
        except ApiError as e:
            log_event("editor", f"save failed: {e.message}")
            self.error = e.message or SAVE_ERROR
            self.state = EditorState.READY
            return False

        self.article = saved
        log_event("editor", f"saved article {saved.id}")

        if needs_summary and has_text(saved.content):
            self.state = EditorState.ENRICHING
            await self._enrich(saved, fields)

        self.state = EditorState.SUCCESS
        if self.on_settled:
            self.on_settled(self.article)
        return True

    async def _enrich(self, saved: Article, fields: dict) -> None:
        """Best-effort summary generation and patch after a successful save."""
        if self._transform_in_flight:
            # One AI request per session; the transform result is dropped on return
            log_event("editor", "waiting for in-flight transform before summarizing")
            await self._transform_done.wait()
        try:
            summary = await self.enrichment.summarize(saved.content)
        except ApiError as e:
            log_event("editor", f"summary generation failed: {e.message}")
            self.notices.append(f"Article saved, but the summary could not be generated: {e.message}")
            return

        if not summary.strip():
            log_event("editor", "summary generation returned nothing")
            return

        patch = {
            "title": fields["title"],
            "content": fields["content"],
            "category": fields["category"],
            "tags": fields["tags"],
            "summary": summary,
        }
        try:
            self.article = await self.content.update(saved.id, patch)
        except ApiError as e:
            log_event("editor", f"summary patch for {saved.id} failed: {e.message}")
            self.unsaved_summary = summary
            self.notices.append(f"Article saved, but the generated summary could not be stored: {e.message}")
            return
        log_event("editor", f"summary added to {saved.id}")

    async def improve(self) -> bool:
        """Replace draft content with the AI-improved version."""
        return await self._transform("improve", lambda text: self.enrichment.improve(text))

    async def apply_prompt(self, instruction: Optional[str] = None) -> bool:
        """Rewrite draft content following a custom instruction.

        Uses draft.custom_prompt when no instruction is given.
        """
        instruction = (instruction if instruction is not None else self.draft.custom_prompt).strip()
        if not instruction:
            return False
        return await self._transform("prompt", lambda text: self.enrichment.apply_prompt(text, instruction))

    async def _transform(self, name: str, call) -> bool:
        if self.state != EditorState.READY:
            return False
        if self._transform_in_flight:
            log_event("editor", f"{name} rejected: another AI request is in flight")
            return False
        if not has_text(self.draft.content):
            return False

        self._transform_in_flight = True
        self._transform_done.clear()
        self.error = None
        source = self.draft.content
        try:
            revised = await call(source)
        except ApiError as e:
            log_event("editor", f"{name} failed: {e.message}")
            if self.state == EditorState.READY:
                self.error = e.message
            return False
        finally:
            self._transform_in_flight = False
            self._transform_done.set()

        if self.state != EditorState.READY:
            # A submit started meanwhile; the saved content wins
            log_event("editor", f"{name} result dropped, session is {self.state.value}")
            return False
        self.draft.content = revised
        return True
