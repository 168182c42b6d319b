"""Standalone AI commands: summary, improve, prompt on a file or stdin."""

import asyncio

from rich.markup import escape
from rich.panel import Panel

from common.display import console
from ..api import ApiError, current_auth
from ..enrichment_service import EnrichmentService
from .save import read_text_arg

_TITLES = {
    "summary": "Summary",
    "improve": "Improved",
    "prompt": "Modified",
}


async def _run(service: EnrichmentService, action: str, text: str, prompt: str | None) -> str:
    if action == "summary":
        return await service.summarize(text)
    if action == "improve":
        return await service.improve(text)
    return await service.apply_prompt(text, prompt or "")


def run_ai(action: str, content: str | None = None, content_file: str | None = None,
           prompt: str | None = None, raw: bool = False) -> int:
    """Run one AI operation and print its result.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    if action == "prompt" and not (prompt or "").strip():
        console.print("[red]Error: --prompt is required for `ai prompt`[/red]")
        return 1

    try:
        text = read_text_arg(content, content_file or ("-" if content is None else None))
    except OSError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    if not (text or "").strip():
        console.print("[red]Error: No text given[/red]")
        return 1

    service = EnrichmentService(current_auth())
    try:
        with console.status("Asking AI...", spinner="dots"):
            result = asyncio.run(_run(service, action, text, prompt))
    except ApiError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        return 1

    if raw:
        print(result)
    else:
        console.print(Panel(escape(result), title=_TITLES[action], border_style="green"))
    return 0
