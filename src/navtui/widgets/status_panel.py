"""Panel showing the last request label and response body."""

from textual.widgets import Static

from navlib.status import StatusEntry


class StatusPanel(Static):
    DEFAULT_CSS = """
    StatusPanel {
        height: 12;
        border: round $accent;
        padding: 0 1;
        overflow-y: auto;
    }
    """

    def __init__(self, **kwargs):
        # Response bodies are arbitrary text, not Rich markup
        super().__init__("", markup=False, **kwargs)

    def show_entry(self, entry: StatusEntry) -> None:
        self.update(f"{entry.label}\n{entry.text}")
