"""Main TUI application with global exception handling."""

import logging
from typing import Optional

from textual.app import App

from navlib import paths
from navlib.clients import Navigator, build_navigator
from navlib.config import load_config
from navlib.controller import NavigationController
from navlib.status import StatusEntry

from .command_parser import CommandParser, CommandType
from .screens.browser_screen import BrowserScreen


logger = logging.getLogger(__name__)


class NavigatorApp(App):
    """Interactive browser for a path-addressed JSON API."""

    TITLE = "navctl"
    SUB_TITLE = "API Navigator"

    CSS = """
    Screen {
        layout: vertical;
    }

    Header {
        dock: top;
    }

    Footer {
        dock: bottom;
    }

    #screen-title {
        padding: 0 1;
        text-style: bold;
    }
    """

    def __init__(self, navigator: Optional[Navigator] = None, location: Optional[str] = None):
        super().__init__()
        self.navigator = navigator
        self.location = location
        self.command_parser = CommandParser()
        self.browser: Optional[BrowserScreen] = None

    def on_mount(self) -> None:
        try:
            if self.navigator is None:
                self.navigator = build_navigator(load_config())
        except Exception as e:
            self.show_error_dialog(
                title="Configuration Error",
                message=f"Failed to load configuration: {e}"
            )
            return

        nav = self.navigator
        self.browser = BrowserScreen()
        self.push_screen(self.browser)

        nav.controller.subscribe(self._on_controller_changed)
        nav.controller.replay_runner = lambda replay: self.run_worker(replay, group="navigation")
        nav.status.subscribe(self._on_status)
        nav.auth.on_prompt(self._on_auth_prompt)

        start = self.location or nav.config.start_location
        logger.info("TUI starting at %s", start)
        self.run_worker(nav.controller.start(start), group="navigation")

    async def on_unmount(self) -> None:
        if self.navigator is not None:
            await self.navigator.aclose()

    def _on_controller_changed(self, ctl: NavigationController) -> None:
        if self.browser is not None:
            self.browser.render_state(ctl)

    def _on_status(self, entry: StatusEntry) -> None:
        if self.browser is not None and self.browser.status_panel is not None:
            self.browser.status_panel.show_entry(entry)

    def _on_auth_prompt(self) -> None:
        self.notify("Authentication required: :auth <user> <password>", severity="warning")

    def send_code(self, code: str, value: Optional[str] = None) -> None:
        nav = self.navigator
        self.run_worker(nav.commands.execute(nav.controller.current_path, code, value), group="commands")

    def run_command(self, text: str) -> None:
        """Execute a ':' command line."""
        parsed = self.command_parser.parse(text)
        if parsed.error:
            self.notify(parsed.error, severity="error")
            return

        nav = self.navigator
        ctl = nav.controller
        kind = parsed.command_type
        logger.info("Command: %s %s", kind.value, parsed.args)

        if kind is CommandType.CD:
            self.run_worker(ctl.navigate_to(paths.parse_user_path(parsed.args[0])), group="navigation")
        elif kind is CommandType.EXEC:
            value = parsed.args[1] if len(parsed.args) > 1 else None
            self.send_code(parsed.args[0], value)
        elif kind is CommandType.BACK:
            self.run_worker(ctl.go_back(), group="navigation")
        elif kind is CommandType.FORWARD:
            self.run_worker(ctl.go_forward(), group="navigation")
        elif kind is CommandType.UP:
            self.run_worker(ctl.go_up(), group="navigation")
        elif kind is CommandType.REFRESH:
            self.run_worker(ctl.refresh(), group="navigation")
        elif kind is CommandType.AUTH:
            password = parsed.args[1] if len(parsed.args) > 1 else ""
            # The controller replays the current path on this change
            nav.auth.set_credentials(parsed.args[0], password)
            self.notify("Credentials updated")
        elif kind is CommandType.QUIT:
            self.exit()
        elif kind is CommandType.HELP:
            nav.status.set_result(":help", self.command_parser.get_help_text())

    async def on_exception(self, exception: Exception) -> None:
        """Global exception handler - never crash."""
        self.show_error_dialog(
            title="Unexpected Error",
            message=f"An error occurred: {str(exception)}"
        )
        logger.error(f"TUI exception: {exception}", exc_info=True)

    def show_error_dialog(self, title: str, message: str) -> None:
        self.bell()
        self.notify(message, title=title, severity="error")
        logger.error(f"{title}: {message}")


def run_tui(location: Optional[str] = None) -> None:
    """Entry point for running the TUI."""
    import os
    import tempfile

    # Configure logging to file only for debugging
    log_file = os.path.join(tempfile.gettempdir(), "navtui_debug.log")
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.FileHandler(log_file, mode='w')
        ]
    )

    logger.info(f"Starting TUI, debug log at: {log_file}")

    app = NavigatorApp(location=location)
    app.run()
