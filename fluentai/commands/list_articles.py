"""List articles command."""

import asyncio
import shutil
from collections import defaultdict

from rich.markup import escape
from rich.text import Text

from common.display import console, tags_text, truncate
from ..api import ApiError, current_auth
from ..content_service import ContentService
from ..models import Article, SearchCriteria, html_to_text
from ..session import get_user

DASHBOARD_LIMIT = 50


def _print_articles(articles: list[Article], verbose: int = 0) -> None:
    """Print articles grouped by category."""
    by_category = defaultdict(list)
    for article in articles:
        by_category[article.category or "uncategorized"].append(article)

    # Calculate widths
    terminal_margin = 12
    terminal_width = shutil.get_terminal_size().columns or 120
    title_max = min(127, terminal_width - 2 * terminal_margin)
    desc_max = terminal_width - terminal_margin

    for category, items in sorted(by_category.items()):
        console.print(f"\n[bold]{escape(category)}[/bold] [dim]({len(items)})[/dim]")

        for article in items:
            title = article.title.strip() or "Untitled"
            summary = article.summary.strip()
            if not summary and verbose:
                summary = html_to_text(article.content)
            if not verbose:
                title = truncate(title, title_max)
                summary = truncate(summary, desc_max)

            line = Text()
            line.append(f"  #{article.id:<8} ", style="dim")
            line.append(title, style="bold" if article.was_updated else "")
            tags = article.display_tags
            if tags:
                chips = tags_text(tags)
                if terminal_width - terminal_margin < len(title) + len(chips):
                    line.append("\n            ")
                else:
                    line.append("  ")
                line.append(chips)
            console.print(line)

            if verbose >= 2:
                stamp = f"created {article.created_at:%Y-%m-%d}" if article.created_at else ""
                if article.was_updated:
                    stamp += f", updated {article.updated_at:%Y-%m-%d}"
                if stamp:
                    console.print(f"            [dim]{stamp}[/dim]")

            if summary:
                console.print(f"            [dim]{escape(summary)}[/dim]")


def list_articles(
    search: str = "",
    category: str | None = None,
    author: str | None = None,
    mine: bool = False,
    limit: int | None = None,
    page: int | None = None,
    verbose: int = 0,
) -> int:
    """List articles matching a search, optionally only the logged-in user's.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    if mine:
        user = get_user() or {}
        author = str(user.get("id") or user.get("_id") or "") or None
        if not author:
            console.print("[red]Error: Not logged in. Run `fluentai login` first.[/red]")
            return 1
        limit = limit or DASHBOARD_LIMIT
        page = page or 1

    criteria = SearchCriteria(query=search, category=category, author=author, limit=limit, page=page)
    service = ContentService(current_auth())

    try:
        with console.status("Fetching...", spinner="dots"):
            articles = asyncio.run(service.list(criteria))
    except ApiError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        return 1

    if not articles:
        console.print("[dim]No articles found.[/dim]")
        return 0

    _print_articles(articles, verbose=verbose)
    console.print(f"\n[bold]{len(articles)}[/bold] articles")
    return 0
