"""Tests for the editor session: save, auto-summary chaining, transforms."""

import asyncio

import pytest

from conftest import FakeEnrichmentService, article
from fluentai.api import ApiError
from fluentai.editor import LOAD_ERROR, EditorSession, EditorState


def fill(session, **overrides):
    fields = dict(title="Title", content="<p>Body</p>", category="technology", tags="a, b ,b,", summary="")
    fields.update(overrides)
    for name, value in fields.items():
        setattr(session.draft, name, value)


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["title", "content", "category"])
async def test_incomplete_draft_submit_is_noop(content, enrichment, missing):
    session = EditorSession(content, enrichment)
    fill(session, **{missing: ""})

    assert await session.submit() is False
    assert session.state == EditorState.READY
    assert content.calls == []
    assert enrichment.calls == []


@pytest.mark.asyncio
async def test_create_without_summary_generates_and_patches_once(content, enrichment):
    settled = []
    session = EditorSession(content, enrichment, on_settled=settled.append)
    fill(session)

    assert await session.submit() is True

    assert content.names() == ["create", "update"]
    assert enrichment.names() == ["summarize"]
    assert enrichment.calls[0][1] == "<p>Body</p>"
    _, article_id, patch = content.calls[1]
    assert article_id == session.article.id
    assert patch == {
        "title": "Title",
        "content": "<p>Body</p>",
        "category": "technology",
        "tags": "a, b ,b,",
        "summary": "Generated summary",
    }
    assert session.state == EditorState.SUCCESS
    assert session.article.summary == "Generated summary"
    assert settled == [session.article]


@pytest.mark.asyncio
async def test_existing_summary_skips_enrichment(content, enrichment):
    session = EditorSession(content, enrichment)
    fill(session, summary="Written by hand")

    assert await session.submit() is True

    assert content.names() == ["create"]
    assert enrichment.calls == []
    assert session.state == EditorState.SUCCESS


@pytest.mark.asyncio
async def test_empty_generated_summary_is_not_patched(content):
    enrichment = FakeEnrichmentService(summary="   ")
    session = EditorSession(content, enrichment)
    fill(session)

    assert await session.submit() is True
    assert content.names() == ["create"]
    assert enrichment.names() == ["summarize"]


@pytest.mark.asyncio
async def test_summarize_failure_still_settles_successfully(content, enrichment):
    enrichment.fail["summarize"] = ApiError("AI unavailable", 503)
    settled = []
    session = EditorSession(content, enrichment, on_settled=settled.append)
    fill(session)

    assert await session.submit() is True

    assert session.state == EditorState.SUCCESS
    assert content.names() == ["create"]
    assert len(settled) == 1
    assert "AI unavailable" in session.notices[0]


@pytest.mark.asyncio
async def test_patch_failure_keeps_generated_summary_for_display(content, enrichment):
    content.fail["update"] = ApiError("Server error", 500)
    session = EditorSession(content, enrichment)
    fill(session)

    assert await session.submit() is True

    assert session.state == EditorState.SUCCESS
    assert session.article.summary == ""
    assert session.unsaved_summary == "Generated summary"
    assert session.notices


@pytest.mark.asyncio
async def test_persist_failure_returns_to_ready_with_server_message(content, enrichment):
    content.fail["create"] = ApiError("Title already used", 409)
    session = EditorSession(content, enrichment)
    fill(session)

    assert await session.submit() is False

    assert session.state == EditorState.READY
    assert session.error == "Title already used"
    assert session.draft.title == "Title"
    assert enrichment.calls == []

    # user may resubmit
    del content.fail["create"]
    assert await session.submit() is True
    assert session.error is None


@pytest.mark.asyncio
async def test_second_submit_while_saving_is_refused(content, enrichment):
    content.gates["create"] = asyncio.Event()
    session = EditorSession(content, enrichment)
    fill(session, summary="S")

    first = asyncio.create_task(session.submit())
    await asyncio.sleep(0)
    assert session.state == EditorState.SAVING
    assert await session.submit() is False

    content.gates["create"].set()
    assert await first is True
    assert content.names() == ["create"]


@pytest.mark.asyncio
async def test_edit_mode_loads_and_updates(content, enrichment):
    content.articles["5"] = article("5", title="Old", summary="Kept")
    session = EditorSession(content, enrichment, article_id="5")
    assert session.state == EditorState.LOADING

    assert await session.open() == EditorState.READY
    assert session.draft.title == "Old"

    session.draft.title = "New"
    assert await session.submit() is True
    assert content.calls[-1][0:2] == ("update", "5")
    assert content.calls[-1][2]["title"] == "New"
    assert enrichment.calls == []


@pytest.mark.asyncio
async def test_edit_mode_load_failure_is_terminal(content, enrichment):
    session = EditorSession(content, enrichment, article_id="missing")

    assert await session.open() == EditorState.ERROR
    assert session.error == LOAD_ERROR

    fill(session)
    assert await session.submit() is False
    assert await session.improve() is False
    assert content.names() == ["get"]


@pytest.mark.asyncio
async def test_enrichment_waits_for_persist(content, enrichment):
    content.gates["create"] = asyncio.Event()
    session = EditorSession(content, enrichment)
    fill(session)

    task = asyncio.create_task(session.submit())
    for _ in range(3):
        await asyncio.sleep(0)
    assert enrichment.calls == []

    content.gates["create"].set()
    await task
    assert enrichment.names() == ["summarize"]


@pytest.mark.asyncio
async def test_improve_writes_back_content(content, enrichment):
    session = EditorSession(content, enrichment)
    fill(session)

    assert await session.improve() is True

    assert session.draft.content == "<p>Better body</p>"
    assert session.state == EditorState.READY
    assert content.calls == []


@pytest.mark.asyncio
async def test_apply_prompt_uses_custom_prompt(content, enrichment):
    session = EditorSession(content, enrichment)
    fill(session)
    session.draft.custom_prompt = "  make it formal "

    assert await session.apply_prompt() is True

    assert enrichment.calls == [("apply_prompt", "<p>Body</p>", "make it formal")]
    assert session.draft.content == "<p>Prompted body</p>"


@pytest.mark.asyncio
async def test_apply_prompt_without_instruction_is_noop(content, enrichment):
    session = EditorSession(content, enrichment)
    fill(session)

    assert await session.apply_prompt("  ") is False
    assert enrichment.calls == []


@pytest.mark.asyncio
async def test_second_transform_is_rejected_not_queued(content, enrichment):
    enrichment.gates["improve"] = asyncio.Event()
    session = EditorSession(content, enrichment)
    fill(session)

    first = asyncio.create_task(session.improve())
    await asyncio.sleep(0)
    assert session.transform_in_flight

    assert await session.apply_prompt("shorter") is False
    assert enrichment.names() == ["improve"]

    enrichment.gates["improve"].set()
    assert await first is True
    assert not session.transform_in_flight
    assert session.draft.content == "<p>Better body</p>"


@pytest.mark.asyncio
async def test_transform_failure_keeps_content(content, enrichment):
    enrichment.fail["improve"] = ApiError("Quota exceeded", 429)
    session = EditorSession(content, enrichment)
    fill(session)

    assert await session.improve() is False

    assert session.draft.content == "<p>Body</p>"
    assert session.error == "Quota exceeded"
    assert session.state == EditorState.READY
    assert session.can_transform


@pytest.mark.asyncio
async def test_transform_result_dropped_once_submit_started(content, enrichment):
    enrichment.gates["improve"] = asyncio.Event()
    session = EditorSession(content, enrichment)
    fill(session, summary="S")

    transform = asyncio.create_task(session.improve())
    await asyncio.sleep(0)
    assert await session.submit() is True

    enrichment.gates["improve"].set()
    assert await transform is False
    assert session.article.content == "<p>Body</p>"


class CountingEnrichment(FakeEnrichmentService):
    """Tracks how many AI requests are open at the same time."""

    def __init__(self):
        super().__init__()
        self.active = 0
        self.peak = 0

    async def _enter(self, name, *args):
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await super()._enter(name, *args)
        finally:
            self.active -= 1


@pytest.mark.asyncio
async def test_summary_waits_for_in_flight_transform(content):
    enrichment = CountingEnrichment()
    enrichment.gates["improve"] = asyncio.Event()
    session = EditorSession(content, enrichment)
    fill(session)

    transform = asyncio.create_task(session.improve())
    await asyncio.sleep(0)
    submit = asyncio.create_task(session.submit())
    await asyncio.sleep(0.01)

    assert session.state == EditorState.ENRICHING
    assert enrichment.names() == ["improve"]

    enrichment.gates["improve"].set()
    assert await submit is True
    assert await transform is False

    assert enrichment.names() == ["improve", "summarize"]
    assert enrichment.peak == 1
    assert session.article.content == "<p>Body</p>"
    assert session.article.summary == "Generated summary"
