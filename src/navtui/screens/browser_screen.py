"""Browser screen: the current path's listing, a command line and the status panel."""

from typing import Any, Dict, List, Optional
import logging

from textual.actions import SkipAction
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import Footer, Header, Static

from navlib import paths
from navlib.controller import NavigationController

from ..widgets.data_table import FilterableDataTable
from ..widgets.search_input import SearchInput
from ..widgets.status_panel import StatusPanel

logger = logging.getLogger(__name__)


class BrowserScreen(Screen):
    """Renders whatever the navigation controller last published."""

    BINDINGS = [
        Binding("escape", "go_back", "Back", priority=True),
        Binding("enter", "select_item", "Open/Send", priority=True),
        Binding("backspace", "go_up", "Up"),
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh"),
        ("slash", "focus_search", "Search"),
        ("colon", "command_mode", "Command"),
    ]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.data_table: Optional[FilterableDataTable] = None
        self.search_input: Optional[SearchInput] = None
        self.status_panel: Optional[StatusPanel] = None

    def compose(self):
        with Vertical():
            yield Header()
            yield Static("/", id="screen-title")
            yield SearchInput(id="search-input")
            yield FilterableDataTable(id="data-table")
            yield StatusPanel(id="status-panel")
            yield Footer()

    def on_mount(self) -> None:
        self.data_table = self.query_one("#data-table", FilterableDataTable)
        self.search_input = self.query_one("#search-input", SearchInput)
        self.status_panel = self.query_one("#status-panel", StatusPanel)
        self.data_table.focus()

    @property
    def controller(self) -> NavigationController:
        return self.app.navigator.controller

    def render_state(self, ctl: NavigationController) -> None:
        """Redraw from controller state; called on every publish."""
        if self.data_table is None:
            return
        title = self.query_one("#screen-title", Static)
        location = paths.encode(ctl.current_path)
        if ctl.loading:
            location += "  (loading…)"
        if ctl.error_message:
            location += f"  ⚠ {ctl.error_message}"
        title.update(location)

        rows: List[Dict[str, Any]] = []
        info = ctl.range_info
        if info.is_range:
            rows = [{"NAME": extra, "KIND": "code", "_name": extra, "_leaf": True} for extra in info.extras]
            rows.insert(0, {"NAME": "0 … 100", "KIND": "range: :exec <n> [value]", "_name": None, "_leaf": True})
            self.data_table.set_data(["NAME", "KIND"], rows)
            return

        for name in ctl.items:
            child = ctl.child_info.get(name)
            if child is None:
                kind = "…"
            else:
                kind = "branch" if child.has_children else "code"
            rows.append(
                {
                    "NAME": name,
                    "KIND": kind,
                    "_name": name,
                    "_leaf": child is not None and not child.has_children,
                    "_listing": child.listing if child is not None else None,
                }
            )
        self.data_table.set_data(["NAME", "KIND"], rows)

    def on_search_input_filter_changed(self, event: SearchInput.FilterChanged) -> None:
        if self.data_table:
            self.data_table.set_filter(event.filter_text)

    def on_search_input_command_entered(self, event: SearchInput.CommandEntered) -> None:
        self.app.run_command(event.command_text)
        if self.data_table:
            self.data_table.focus()

    def action_select_item(self) -> None:
        if self.search_input and self.search_input.has_focus:
            raise SkipAction()
        if not self.data_table:
            return
        row = self.data_table.get_selected_row()
        if not row or row.get("_name") is None:
            return
        name = row["_name"]
        if row.get("_leaf"):
            # Leaves are codes for the current path
            self.app.send_code(name)
            return
        target = paths.child_path(self.controller.current_path, name)
        logger.info("Opening %s", paths.encode(target))
        self.run_worker(self.controller.navigate_to(target, row.get("_listing")), group="navigation")

    def action_go_back(self) -> None:
        if self.search_input and self.search_input.has_focus:
            self.search_input.value = ""
            if self.data_table:
                self.data_table.focus()
            return
        self.run_worker(self.controller.go_back(), group="navigation")

    def action_go_up(self) -> None:
        if self.search_input and self.search_input.has_focus:
            raise SkipAction()
        self.run_worker(self.controller.go_up(), group="navigation")

    def action_refresh(self) -> None:
        self.run_worker(self.controller.refresh(), group="navigation")

    def action_quit(self) -> None:
        self.app.exit()

    def action_focus_search(self) -> None:
        if self.search_input:
            self.search_input.focus()

    def action_command_mode(self) -> None:
        if self.search_input:
            self.search_input.value = ":"
            self.search_input.cursor_position = 1
            self.search_input.focus()
