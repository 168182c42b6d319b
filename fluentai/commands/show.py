"""Show article command - detail view with optional similar articles."""

import asyncio

from rich.markup import escape
from rich.panel import Panel

from common.display import console, format_tags_display, format_timestamp
from ..api import ApiError, current_auth
from ..content_service import ContentService
from ..models import Article, html_to_text


def render_article(article: Article) -> None:
    """Print the full article: header, summary panel, content as text."""
    console.rule(f"[dim]{escape(article.category or 'uncategorized')} · #{escape(article.id)}[/dim]")
    console.print(f"[bold]{escape(article.title or 'Untitled')}[/bold]")

    stamp = f"Created {format_timestamp(article.created_at)}"
    if article.was_updated:
        stamp += f" · Updated {format_timestamp(article.updated_at)}"
    console.print(f"[dim]{stamp}[/dim]")

    if article.display_tags:
        console.print(f"Tags: {format_tags_display(article.display_tags)}")

    if article.summary:
        console.print(Panel(escape(article.summary), title="Summary", border_style="green"))

    console.print()
    text = html_to_text(article.content)
    if text:
        console.print(text, markup=False)
    else:
        console.print("[dim]No content[/dim]")


async def _load(service: ContentService, article_id: str, similar: bool):
    article = await service.get(article_id)
    related = None
    if similar:
        try:
            related = await service.similar(article_id)
        except ApiError as e:
            console.print(f"[yellow]Warning: {escape(e.message)}[/yellow]")
            related = []
    return article, related


def show_article(article_id: str, similar: bool = False) -> int:
    """Fetch and display one article.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    service = ContentService(current_auth())
    try:
        with console.status("Fetching...", spinner="dots"):
            article, related = asyncio.run(_load(service, article_id, similar))
    except ApiError:
        console.print("[red]Article not found.[/red]")
        return 1

    render_article(article)

    if related is not None:
        console.print()
        console.rule("[dim]Similar articles[/dim]")
        if not related:
            console.print("[dim]No similar articles.[/dim]")
        for item in related:
            console.print(f"  [dim]#{escape(item.id):<8}[/dim] {escape(item.title or 'Untitled')}")
    return 0
