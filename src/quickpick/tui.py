"""TUI picker driving a quick-input session."""

from typing import Any, Iterable

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header, Input, Label, ListItem, ListView, Static

from .config import Config, load_config
from .fuzzy import highlight_segments
from .items import ItemProjection, SearchItem
from .recent import RecentRepository
from .session import (
    KEY_DOWN,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_UP,
    Event,
    ItemSelected,
    QuickInputSession,
)

MATCH_STYLE = "bold underline"


def render_candidate(item: SearchItem, highlight: bool = True, show_other_matches: bool = True) -> Text:
    """Render a candidate as rich text with its matched characters styled."""
    line = Text()
    primary = item.is_primary_match

    if highlight and primary:
        for chunk, matched in highlight_segments(item.text, item.matches):
            line.append(chunk, style=MATCH_STYLE if matched else None)
    else:
        line.append(item.text)

    if show_other_matches and not primary:
        line.append(f" ({item.other_match_field_name}: ", style="dim")
        value = item.other_match_field_value or ""
        if highlight:
            for chunk, matched in highlight_segments(value, item.matches):
                line.append(chunk, style=MATCH_STYLE if matched else "dim")
        else:
            line.append(value, style="dim")
        line.append(")", style="dim")

    return line


class CandidateItem(ListItem):
    """List row for one visible candidate."""

    def __init__(self, item: SearchItem, highlight: bool, show_other_matches: bool):
        super().__init__()
        self.item = item
        self.highlight = highlight
        self.show_other_matches = show_other_matches

    def compose(self) -> ComposeResult:
        yield Label(render_candidate(self.item, self.highlight, self.show_other_matches))


class QuickPickApp(App[Any]):
    """Fuzzy picker: type to filter, arrows to move, enter to choose."""

    CSS = """
    Screen {
        background: $surface;
    }
    #main-container {
        padding: 1 2;
    }
    #query-input {
        width: 100%;
    }
    #result-list {
        height: 1fr;
        min-height: 3;
        margin-top: 1;
        border: solid $primary;
    }
    #status {
        height: auto;
        margin-top: 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("up", "cursor_up", "Up", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("escape", "escape", "Clear/Quit"),
    ]

    def __init__(
        self,
        items: Iterable[Any],
        projection: ItemProjection | None = None,
        config: Config | None = None,
        recent_repository: RecentRepository | None = None,
        placeholder: str = "Search...",
    ):
        super().__init__()
        self.candidates = list(items)
        self.config = config or load_config()
        self.placeholder = placeholder
        self.session: QuickInputSession[Any] = QuickInputSession(
            projection,
            self.config,
            recent_repository,
            on_event=self._on_session_event,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main-container"):
            yield Input(placeholder=self.placeholder, id="query-input")
            yield ListView(id="result-list")
            yield Static("", id="status")
        yield Footer()

    async def on_mount(self) -> None:
        await self.session.set_items(self.candidates)
        self.query_one("#result-list", ListView).can_focus = False
        self.query_one("#query-input", Input).focus()
        self.session.focus()
        self._refresh_list()

    def _on_session_event(self, event: Event) -> None:
        if isinstance(event, ItemSelected) and event.value is not None:
            self.exit(event.value)

    def _refresh_list(self) -> None:
        """Rebuild the list rows from the session's visible candidates."""
        list_view = self.query_one("#result-list", ListView)
        list_view.clear()

        visible = self.session.visible
        for item in visible:
            list_view.append(
                CandidateItem(
                    item,
                    self.config.list.highlight_matches,
                    self.config.list.show_other_matches,
                )
            )

        if 0 <= self.session.selected_index < len(visible):
            list_view.index = self.session.selected_index

        if not self.session.has_results:
            self._update_status("No results")
        else:
            self._update_status(f"{len(visible)}/{len(self.session.items)}")

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "query-input":
            self.session.change_input(event.value)
            self._refresh_list()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "query-input":
            await self.session.key_down(KEY_ENTER)
            self._refresh_list()

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, CandidateItem):
            await self.session.select(event.item.item)

    async def action_cursor_up(self) -> None:
        await self.session.key_down(KEY_UP)
        self._refresh_list()

    async def action_cursor_down(self) -> None:
        await self.session.key_down(KEY_DOWN)
        self._refresh_list()

    async def action_escape(self) -> None:
        """Clear the query, or quit when it is already empty."""
        if not self.session.has_input_value:
            self.exit(None)
            return
        await self.session.key_down(KEY_ESCAPE)
        self.query_one("#query-input", Input).value = self.session.input_value
        self._refresh_list()

    def _update_status(self, message: str) -> None:
        """Update status bar."""
        self.query_one("#status", Static).update(message)


def run_tui(
    items: Iterable[Any],
    projection: ItemProjection | None = None,
    config: Config | None = None,
    recent_repository: RecentRepository | None = None,
) -> Any:
    """Run TUI and return the selected value or None."""
    app = QuickPickApp(items, projection, config, recent_repository)
    return app.run()
