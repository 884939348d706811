"""Command/filter input for the browser screen."""

from textual.widgets import Input
from textual.message import Message


class SearchInput(Input):
    """Filters the listing as you type; lines starting with ':' are commands."""

    class FilterChanged(Message):
        """Message sent when filter text changes."""

        def __init__(self, filter_text: str) -> None:
            super().__init__()
            self.filter_text = filter_text

    class CommandEntered(Message):
        """Message sent when a ':' command is submitted."""

        def __init__(self, command_text: str) -> None:
            super().__init__()
            self.command_text = command_text

    def __init__(self, **kwargs):
        super().__init__(placeholder="Type to filter, or :help", **kwargs)

    def on_input_changed(self, event: Input.Changed) -> None:
        """Emit filter changes; commands don't filter."""
        event.stop()
        if event.value.startswith(":"):
            return
        self.post_message(self.FilterChanged(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if event.value.startswith(":"):
            self.post_message(self.CommandEntered(event.value))
            self.value = ""
