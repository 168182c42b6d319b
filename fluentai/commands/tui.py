"""Interactive TUI browser for FluentAI articles."""

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import ModalScreen
from textual.widgets import DataTable, Footer, Header, Input, Label, Markdown
from textual.widgets.data_table import CellDoesNotExist, RowDoesNotExist

from common.display import format_timestamp, get_tag_color, truncate
from ..api import current_auth
from ..content_service import ContentService
from ..list_mutation import ListMutationCoordinator
from ..models import CATEGORIES, Article, SearchCriteria, html_to_text
from ..search import SearchQueryController, SearchState

# Category filter cycle: all, then each category
_CATEGORY_CYCLE: list[str | None] = [None, *CATEGORIES]


class _ConfirmDeleteScreen(ModalScreen[bool]):
    """Modal asking the user to confirm a delete."""

    CSS = """
    _ConfirmDeleteScreen {
        align: center middle;
    }
    _ConfirmDeleteScreen Label {
        padding: 2 4;
        background: $panel;
        border: tall $error;
        text-align: center;
    }
    """

    BINDINGS = [
        Binding("y", "yes", "Yes"),
        Binding("n", "no", "No"),
        Binding("escape", "no", "No"),
    ]

    def __init__(self, title: str, **kwargs):
        super().__init__(**kwargs)
        self._title = title

    def compose(self) -> ComposeResult:
        yield Label(f"Delete article?\n\n{self._title}\n\n[y] Yes   [n] No", markup=False)

    def action_yes(self) -> None:
        self.dismiss(True)

    def action_no(self) -> None:
        self.dismiss(False)


class ArticleBrowserApp(App):
    """Searchable article list with a detail panel."""

    TITLE = "FluentAI Articles"

    CSS = """
    Screen {
        background: $background;
    }

    #search {
        dock: top;
        margin: 0 1;
    }

    /* ── Left panel ─────────────────── */
    #left-panel {
        width: 2fr;
        background: $panel;
        border-right: tall $primary-darken-3;
    }

    /* ── Right panel ────────────────── */
    #right-panel {
        width: 3fr;
        height: 1fr;
        padding: 1 3;
        background: $background;
        overflow-y: auto;
    }

    Footer {
        background: $panel-darken-2;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "escape_action", "Back", show=False),
        Binding("slash", "focus_search", "Search"),
        Binding("ctrl+t", "cycle_category", "Category"),
        Binding("r", "refresh", "Reload"),
        Binding("d", "delete", "Delete"),
    ]

    def __init__(self, service: ContentService, criteria: SearchCriteria | None = None, **kwargs):
        super().__init__(**kwargs)
        self._service = service
        self._initial_criteria = criteria or SearchCriteria()
        self._search: SearchQueryController | None = None
        self._list = ListMutationCoordinator(service)
        self._selected_id: str | None = None

    # ── Compose ───────────────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Input(value=self._initial_criteria.query, placeholder="Search articles...", id="search")
        with Horizontal():
            table: DataTable = DataTable(id="left-panel", cursor_type="row", zebra_stripes=True)
            yield table
            yield Markdown("*Select an article to view details.*", id="right-panel")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#left-panel", DataTable)
        table.add_column(" ", key="status", width=1)
        table.add_column("Title", key="title")
        table.add_column("Category", key="category")
        table.add_column("Tags", key="tags")

        self._search = SearchQueryController(
            self._service,
            on_results=self._on_results,
            on_error=self._on_error,
            criteria=self._initial_criteria,
        )
        self._search.refresh()
        self._set_subtitle()

    def on_unmount(self) -> None:
        if self._search:
            self._search.close()

    # ── Search ────────────────────────────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        if self._search is None or event.input.id != "search":
            return
        self._search.update(self._search.criteria.with_query(event.value))
        self._set_subtitle()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.query_one("#left-panel", DataTable).focus()

    def _on_results(self, articles: list[Article]) -> None:
        self._list.reset(articles)
        self._rebuild_table()
        self._set_subtitle()

    def _on_error(self, message: str) -> None:
        self.notify(message, severity="error", timeout=5)

    def action_focus_search(self) -> None:
        self.query_one("#search", Input).focus()

    def action_cycle_category(self) -> None:
        if self._search is None:
            return
        current = self._search.criteria.category
        index = _CATEGORY_CYCLE.index(current) if current in _CATEGORY_CYCLE else 0
        category = _CATEGORY_CYCLE[(index + 1) % len(_CATEGORY_CYCLE)]
        self._search.update(self._search.criteria.with_category(category))
        self._set_subtitle()

    def action_refresh(self) -> None:
        if self._search:
            self._search.refresh()
            self._set_subtitle()

    async def action_escape_action(self) -> None:
        """Leave the search box on first Escape; quit on second."""
        search = self.query_one("#search", Input)
        if search.has_focus:
            self.query_one("#left-panel", DataTable).focus()
        else:
            self.exit()

    # ── Table ─────────────────────────────────────────────────────────────────

    def _row_cells(self, article: Article) -> tuple:
        tags = Text()
        for tag in article.display_tags:
            tags.append(f"{tag} ", style=get_tag_color(tag))
        status = Text("⟳", style="yellow bold") if self._list.is_pending(article.id) else Text(" ")
        title = Text(truncate(article.title or "Untitled", 60))
        if article.id in self._list.errors:
            title.stylize("red")
        return status, title, Text(article.category or "—", style="dim"), tags

    def _rebuild_table(self) -> None:
        table = self.query_one("#left-panel", DataTable)
        table.clear()
        for article in self._list.items:
            table.add_row(*self._row_cells(article), key=article.id)

    def _refresh_row(self, article_id: str) -> None:
        article = self._list.find(article_id)
        if article is None:
            return
        table = self.query_one("#left-panel", DataTable)
        status, title, _category, _tags = self._row_cells(article)
        try:
            table.update_cell(article_id, "status", status)
            table.update_cell(article_id, "title", title)
        except CellDoesNotExist:
            # row replaced by a newer result set
            pass

    async def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        self._selected_id = event.row_key.value if event.row_key else None
        await self._refresh_detail()
        self.refresh_bindings()

    # ── Detail panel ──────────────────────────────────────────────────────────

    async def _refresh_detail(self) -> None:
        panel = self.query_one("#right-panel", Markdown)
        article = self._list.find(self._selected_id) if self._selected_id else None
        if article is None:
            await panel.update("*No article selected.*")
            return
        await panel.update(self._build_markdown(article))
        panel.scroll_home(animate=False)

    def _build_markdown(self, article: Article) -> str:
        title = article.title.strip() or "Untitled"
        tags_line = "  ".join(f"`{t}`" for t in article.display_tags) or "—"
        md = f"# {title}\n\n"
        md += f"**Category:** {article.category or '—'}\n\n"
        md += f"**Tags:** {tags_line}\n\n"
        stamp = f"Created {format_timestamp(article.created_at)}"
        if article.was_updated:
            stamp += f" · Updated {format_timestamp(article.updated_at)}"
        md += f"*{stamp}*\n\n"
        if article.id in self._list.errors:
            md += f"> ⚠ {self._list.errors[article.id]}\n\n"
        if article.summary:
            md += f"---\n\n### Summary\n\n{article.summary}\n\n"
        text = html_to_text(article.content)
        if text:
            md += f"---\n\n{text}\n"
        return md

    # ── Delete ────────────────────────────────────────────────────────────────

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action == "delete":
            return bool(self._selected_id) and not self._list.is_pending(self._selected_id)
        return True

    def action_delete(self) -> None:
        article_id = self._selected_id
        if not article_id:
            return
        if self._list.is_pending(article_id):
            self.notify("Already deleting…", timeout=3)
            return
        self._delete_worker(article_id)

    @work
    async def _delete_worker(self, article_id: str) -> None:
        """Confirm, delete, then drop the row; the TUI stays responsive meanwhile."""

        async def confirm(article: Article) -> bool:
            self._refresh_row(article_id)
            return bool(await self.push_screen_wait(_ConfirmDeleteScreen(article.title or "Untitled")))

        deleted = await self._list.delete(article_id, confirm)
        table = self.query_one("#left-panel", DataTable)

        if deleted:
            try:
                table.remove_row(article_id)
            except RowDoesNotExist:
                pass
            if self._selected_id == article_id:
                self._selected_id = None
                await self._refresh_detail()
            self.notify("Article deleted", timeout=3)
        elif article_id in self._list.errors:
            self.notify(self._list.errors[article_id], severity="error", timeout=5)
            if self._selected_id == article_id:
                await self._refresh_detail()

        self._refresh_row(article_id)
        self._set_subtitle()
        self.refresh_bindings()

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _set_subtitle(self) -> None:
        if self._search is None:
            return
        criteria = self._search.criteria
        parts = [f"{len(self._list.items)} articles"]
        if criteria.category:
            parts.append(f"#{criteria.category}")
        if self._search.state != SearchState.IDLE:
            parts.append("searching…")
        self.sub_title = "  ·  ".join(parts)


# ── Entry point ───────────────────────────────────────────────────────────────

def launch_tui(search: str = "", category: str | None = None) -> int:
    """Launch the interactive TUI browser for articles."""
    service = ContentService(current_auth())
    app = ArticleBrowserApp(service, criteria=SearchCriteria(query=search, category=category))
    app.run()
    return 0
