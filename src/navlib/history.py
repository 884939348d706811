"""In-memory location history with browser-style back/forward."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from . import paths


@dataclass(frozen=True)
class LocationEntry:
    path: paths.Segments

    @property
    def token(self) -> str:
        return paths.to_location(self.path)


class LocationHistory:
    def __init__(self) -> None:
        self._entries: List[LocationEntry] = []
        self._index = -1

    @property
    def entries(self) -> List[LocationEntry]:
        return list(self._entries)

    @property
    def current(self) -> Optional[LocationEntry]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return 0 <= self._index < len(self._entries) - 1

    def push(self, segments: Iterable[str]) -> LocationEntry:
        """Add an entry after the current one, dropping any forward entries."""
        entry = LocationEntry(paths.as_path(segments))
        del self._entries[self._index + 1:]
        self._entries.append(entry)
        self._index = len(self._entries) - 1
        return entry

    def replace(self, segments: Iterable[str]) -> LocationEntry:
        if self._index < 0:
            return self.push(segments)
        entry = LocationEntry(paths.as_path(segments))
        self._entries[self._index] = entry
        return entry

    def back(self) -> Optional[LocationEntry]:
        if not self.can_go_back:
            return None
        self._index -= 1
        return self._entries[self._index]

    def forward(self) -> Optional[LocationEntry]:
        if not self.can_go_forward:
            return None
        self._index += 1
        return self._entries[self._index]
