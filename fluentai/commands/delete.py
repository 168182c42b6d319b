"""Delete article command."""

import asyncio

from rich.markup import escape
from rich.prompt import Confirm

from common.display import console
from ..api import ApiError, current_auth
from ..content_service import ContentService
from ..list_mutation import ListMutationCoordinator
from ..models import Article


async def _delete(service: ContentService, article_id: str, yes: bool) -> int:
    coordinator = ListMutationCoordinator(service)
    try:
        coordinator.reset([await service.get(article_id)])
    except ApiError:
        console.print("[red]Article not found.[/red]")
        return 1

    def confirm(article: Article) -> bool:
        if yes:
            return True
        return Confirm.ask(f"Delete [bold]{escape(article.title or 'Untitled')}[/bold] (#{escape(article.id)})?", default=False)

    deleted = await coordinator.delete(article_id, confirm)
    if deleted:
        console.print("[red]Deleted.[/red]")
        return 0
    if article_id in coordinator.errors:
        console.print(f"[red]Error: {escape(coordinator.errors[article_id])}[/red]")
        return 1
    console.print("[dim]Cancelled.[/dim]")
    return 0


def delete_article(article_id: str, yes: bool = False) -> int:
    """Delete an article after confirmation.

    Returns:
        Exit code (0 = deleted or cancelled, 1 = error)
    """
    return asyncio.run(_delete(ContentService(current_auth()), article_id, yes))
