"""Persistent listing cache keyed by serialised path."""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from . import paths
from .errors import FetchError

if TYPE_CHECKING:
    from .gateway import Gateway

logger = logging.getLogger(__name__)


class PersistOutcome(Enum):
    SAVED = "saved"
    FAILED = "failed"
    DISABLED = "disabled"


def _is_listing(value: object) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


class ListingCache:
    """Map of ``/a/b`` -> child names.

    Entries are only added after a successful fetch and are never evicted;
    :meth:`clear` is the only way to drop them. Durability is best-effort:
    the in-memory map stays authoritative when the store cannot be written.
    """

    def __init__(self, store_path: Optional[Path] = None) -> None:
        self.store_path = store_path
        self._entries: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, segments: Iterable[str]) -> bool:
        return paths.encode(segments) in self._entries

    def load(self) -> "ListingCache":
        self._entries = {}
        if self.store_path is None or not self.store_path.is_file():
            return self
        try:
            raw = json.loads(self.store_path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Resetting unreadable listing cache %s: %s", self.store_path, e)
            return self
        if not isinstance(raw, dict):
            logger.warning("Resetting listing cache %s: root is not an object", self.store_path)
            return self
        for key, value in raw.items():
            if isinstance(key, str) and _is_listing(value):
                self._entries[key] = list(value)
        logger.info("Loaded %d cached listings from %s", len(self._entries), self.store_path)
        return self

    def save(self) -> PersistOutcome:
        if self.store_path is None:
            return PersistOutcome.DISABLED
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            self.store_path.write_text(json.dumps(self._entries))
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not persist listing cache to %s: %s", self.store_path, e)
            return PersistOutcome.FAILED
        return PersistOutcome.SAVED

    def clear(self) -> PersistOutcome:
        self._entries = {}
        return self.save()

    def snapshot(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self._entries.items()}

    def get(self, segments: Iterable[str]) -> Optional[List[str]]:
        return self._entries.get(paths.encode(segments))

    def put(self, segments: Iterable[str], listing: List[str]) -> PersistOutcome:
        self._entries[paths.encode(segments)] = list(listing)
        return self.save()

    async def fetch_or_get(self, segments: Iterable[str], gateway: "Gateway") -> List[str]:
        """Return the cached listing, or fetch, store and persist it.

        Raises :class:`FetchError` on a non-200 status or a body whose
        ``data`` is not a list of strings.
        """
        segments = paths.as_path(segments)
        key = paths.encode(segments)
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        res = await gateway.send(key)
        if not res.ok or res.status != 200:
            raise FetchError(key, res.status, f"{res.status} on {key}: {res.text or '(no body)'}")
        data = res.json.get("data") if isinstance(res.json, dict) else None
        if not _is_listing(data):
            raise FetchError(key, res.status, f"Unexpected response at {key}")

        self.put(segments, data)
        return self._entries[key]

    async def try_fetch_or_get(self, segments: Iterable[str], gateway: "Gateway") -> Optional[List[str]]:
        """Like :meth:`fetch_or_get` but returns ``None`` on any failure."""
        try:
            return await self.fetch_or_get(segments, gateway)
        except FetchError as e:
            logger.debug("Speculative fetch failed for %s: %s", e.path, e.reason)
            return None
