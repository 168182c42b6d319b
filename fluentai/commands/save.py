"""Create/edit article commands - drive an EditorSession from the command line."""

import asyncio
import sys
from pathlib import Path

from rich.markup import escape

from common.display import console, format_tags_display, show_diff
from ..api import current_auth
from ..content_service import ContentService
from ..editor import EditorSession, EditorState
from ..enrichment_service import EnrichmentService
from ..models import html_to_text, normalize_tags


def read_text_arg(content: str | None, content_file: str | None) -> str | None:
    """Resolve --content / --content-file (`-` reads stdin)."""
    if content_file == "-":
        return sys.stdin.read()
    if content_file:
        return Path(content_file).read_text(encoding="utf-8")
    return content


def _apply_fields(session: EditorSession, fields: dict) -> None:
    """Overlay command-line values onto the loaded draft."""
    for name, value in fields.items():
        if value is not None:
            setattr(session.draft, name, value)


async def _run_transform(session: EditorSession, label: str, call) -> bool:
    before = session.draft.content
    with console.status(f"  {label}...", spinner="dots"):
        ok = await call()
    if not ok:
        console.print(f"[yellow]Warning: {escape(session.error or label + ' skipped')}[/yellow]")
        return False
    console.print(f"[green]✓ {label}[/green]")
    show_diff(html_to_text(before), html_to_text(session.draft.content), indent="  ", label="content")
    return True


def _display_draft(session: EditorSession) -> None:
    draft = session.draft
    console.print(f"[green]+ title:[/green] {escape(draft.title)}")
    console.print(f"[green]+ category:[/green] {escape(draft.category)}")
    if draft.summary:
        console.print(f"[green]+ summary:[/green] {escape(draft.summary)}")
    if draft.tags:
        console.print(f"[green]+ tags:[/green] {format_tags_display(normalize_tags(draft.tags))}")
    text = html_to_text(draft.content)
    console.print(f"[green]+ content:[/green] [dim]{len(text):,} chars[/dim]")
    console.print()


async def _save(
    article_id: str | None,
    fields: dict,
    improve: bool,
    prompt: str | None,
    dry_run: bool,
) -> int:
    auth = current_auth()
    session = EditorSession(ContentService(auth), EnrichmentService(auth), article_id=article_id)

    if session.is_edit:
        with console.status("Loading...", spinner="dots"):
            await session.open()
        if session.state == EditorState.ERROR:
            console.print(f"[red]Error: {escape(session.error)}[/red]")
            return 1

    _apply_fields(session, fields)

    if improve:
        await _run_transform(session, "Improving content", session.improve)
    if prompt:
        session.draft.custom_prompt = prompt
        await _run_transform(session, "Applying prompt", session.apply_prompt)

    _display_draft(session)

    errors = session.draft.validation_errors()
    if errors:
        for error in errors:
            console.print(f"[red]Error: {escape(error)}[/red]")
        return 1

    if dry_run:
        verb = "update" if session.is_edit else "create"
        console.print(f"[dim](dry-run) Would {verb} article[/dim]")
        return 0

    with console.status("Saving...", spinner="dots"):
        ok = await session.submit()

    if not ok:
        console.print(f"[red]Error: {escape(session.error or 'Failed to save article')}[/red]")
        return 1

    for notice in session.notices:
        console.print(f"[yellow]⚠ {escape(notice)}[/yellow]")
    if session.unsaved_summary:
        console.print(f"[dim]Generated summary (not stored):[/dim] {escape(session.unsaved_summary)}")

    article = session.article
    console.print(f"[green]Saved![/green] #{escape(article.id)} {escape(article.title)}")
    if article.summary and not fields.get("summary"):
        console.print(f"[dim]Summary:[/dim] {escape(article.summary)}")
    return 0


def save_article(
    article_id: str | None = None,
    title: str | None = None,
    content: str | None = None,
    content_file: str | None = None,
    summary: str | None = None,
    category: str | None = None,
    tags: str | None = None,
    improve: bool = False,
    prompt: str | None = None,
    dry_run: bool = False,
) -> int:
    """Create a new article, or edit an existing one when article_id is given.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        text = read_text_arg(content, content_file)
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    fields = {
        "title": title,
        "content": text,
        "summary": summary,
        "category": category,
        "tags": tags,
    }
    return asyncio.run(_save(article_id, fields, improve, prompt, dry_run))
