"""Navigation controller: resolve a path, cache it, classify its children.

Every :meth:`NavigationController.navigate_to` call starts a new session by
bumping a generation counter. Work belonging to an older session keeps
running until its next ``await`` returns, then notices it is stale and
stops without publishing anything. Only the most recent navigation ever
writes ``current_path``, ``items``, ``child_info`` or ``loading``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Coroutine, Dict, Iterable, List, Optional

from . import paths
from .cache import ListingCache
from .errors import FetchError
from .history import LocationHistory
from .ranges import RangeInfo, analyze_numeric_range

if TYPE_CHECKING:
    from .auth import AuthState
    from .gateway import Gateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChildInfo:
    has_children: bool
    listing: Optional[List[str]] = None


class NavigationController:
    def __init__(
        self,
        gateway: "Gateway",
        cache: ListingCache,
        history: Optional[LocationHistory] = None,
        auth: Optional["AuthState"] = None,
    ) -> None:
        self.gateway = gateway
        self.cache = cache
        self.history = history or LocationHistory()
        self.auth = auth

        self.current_path: paths.Segments = paths.ROOT
        self.items: List[str] = []
        self.loading = False
        self.error_message = ""
        self.last_error: Optional[FetchError] = None
        self.child_info: Dict[str, ChildInfo] = {}
        self.replay_task: Optional[asyncio.Task] = None
        self.replay_runner: Optional[Callable[[Coroutine[Any, Any, bool]], Any]] = None

        self._generation = 0
        self._listeners: List[Callable[["NavigationController"], None]] = []

        if auth is not None:
            auth.subscribe(self._on_credentials_changed)

    @property
    def range_info(self) -> RangeInfo:
        return analyze_numeric_range(self.items)

    @property
    def session(self) -> int:
        return self._generation

    def is_current(self, session: int) -> bool:
        return session == self._generation

    def subscribe(self, callback: Callable[["NavigationController"], None]) -> None:
        self._listeners.append(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    async def navigate_to(
        self,
        path: Iterable[str],
        known_listing: Optional[List[str]] = None,
        record: bool = True,
    ) -> bool:
        """Navigate to ``path``; returns True if this session published its results.

        ``known_listing`` skips the fetch. ``record`` pushes a history entry;
        pass False when replaying (back/forward, auth refresh).
        """
        path = paths.as_path(path)
        self._generation += 1
        session = self._generation
        self.loading = True
        self.error_message = ""
        self.last_error = None
        self._notify()

        try:
            if known_listing is not None:
                items = list(known_listing)
            else:
                items = await self.cache.fetch_or_get(path, self.gateway)

            if not self.is_current(session):
                logger.debug("Dropping stale listing for %s (session %d)", paths.encode(path), session)
                return False

            self.current_path = path
            self.items = list(items)
            self.child_info = {}
            if record:
                self.history.push(path)
            self._notify()

            if not self.range_info.is_range:
                await self._load_child_info(path, self.items, session)
            return self.is_current(session)
        except FetchError as e:
            if not self.is_current(session):
                return False
            self.last_error = e
            self.error_message = f"Error loading {paths.encode(path)}: {e.reason}"
            logger.info(self.error_message)
            return False
        finally:
            if self.is_current(session):
                self.loading = False
                self._notify()

    async def _load_child_info(self, path: paths.Segments, items: List[str], session: int) -> None:
        info: Dict[str, ChildInfo] = {}
        for item in items:
            if not self.is_current(session):
                return
            listing = await self.cache.try_fetch_or_get(paths.child_path(path, item), self.gateway)
            if not self.is_current(session):
                logger.debug("Abandoning child classification for %s", paths.encode(path))
                return
            info[item] = ChildInfo(has_children=bool(listing), listing=listing)
        if self.is_current(session):
            self.child_info = info

    async def start(self, location: str) -> bool:
        """Initial load from a location token; records it without adding history."""
        path = paths.decode(location)
        # Recorded before the fetch so a navigation that overtakes this one
        # pushes after it instead of being overwritten.
        self.history.replace(path)
        return await self.navigate_to(path, record=False)

    async def refresh(self) -> bool:
        return await self.navigate_to(self.current_path, record=False)

    async def go_back(self) -> bool:
        entry = self.history.back()
        if entry is None:
            return False
        return await self.navigate_to(entry.path, record=False)

    async def go_forward(self) -> bool:
        entry = self.history.forward()
        if entry is None:
            return False
        return await self.navigate_to(entry.path, record=False)

    async def go_up(self) -> bool:
        if not self.current_path:
            return False
        return await self.navigate_to(paths.parent_path(self.current_path))

    def _on_credentials_changed(self, version: int) -> None:
        """Reload the current path under the new credentials.

        With ``replay_runner`` set (the TUI hands in its worker launcher) the
        replay goes there; otherwise it becomes ``replay_task`` on the running
        loop. Without either there is no live navigation to replay.
        """
        if self.replay_runner is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("Credentials changed (version %d) with no event loop; nothing to replay", version)
                return
        logger.info("Credentials changed; reloading %s", paths.encode(self.current_path))
        replay = self.navigate_to(self.current_path, record=False)
        if self.replay_runner is not None:
            self.replay_runner(replay)
        else:
            self.replay_task = loop.create_task(replay)
