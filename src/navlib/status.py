"""Status/response channel: the last request label and its response body."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, List


@dataclass(frozen=True)
class StatusEntry:
    label: str
    text: str


class StatusChannel:
    def __init__(self, max_entries: int = 200) -> None:
        self.label = ""
        self.text = ""
        self.entries: Deque[StatusEntry] = deque(maxlen=max_entries)
        self._subscribers: List[Callable[[StatusEntry], None]] = []

    def set_result(self, label: str, payload: Any) -> StatusEntry:
        """Record a request label and its body; non-strings are pretty-printed as JSON."""
        if isinstance(payload, str):
            text = payload
        else:
            text = json.dumps(payload, indent=2)
        self.label = label
        self.text = text
        entry = StatusEntry(label=label, text=text)
        self.entries.append(entry)
        for callback in list(self._subscribers):
            callback(entry)
        return entry

    def subscribe(self, callback: Callable[[StatusEntry], None]) -> None:
        self._subscribers.append(callback)
