from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import httpx

from . import paths
from .auth import AuthState
from .cache import ListingCache
from .commands import CommandDispatcher
from .config import Config
from .controller import NavigationController
from .gateway import Gateway
from .history import LocationHistory
from .status import StatusChannel


@dataclass
class Navigator:
    """Everything a front end needs, wired to one config."""

    config: Config
    auth: AuthState
    status: StatusChannel
    gateway: Gateway
    cache: ListingCache
    history: LocationHistory
    controller: NavigationController
    commands: CommandDispatcher

    async def aclose(self) -> None:
        await self.gateway.aclose()


def build_navigator(cfg: Config, transport: Optional[httpx.AsyncBaseTransport] = None) -> Navigator:
    """Build the gateway, cache and controller for a config.

    The listing cache is loaded from disk here; credentials load lazily on
    first use.
    """
    auth = AuthState(cfg.credentials_path)
    status = StatusChannel()
    gateway = Gateway(cfg.base_url, auth=auth, status=status, timeout=cfg.timeout, transport=transport)
    cache = ListingCache(cfg.cache_path).load()
    history = LocationHistory()
    controller = NavigationController(gateway, cache, history=history, auth=auth)
    return Navigator(
        config=cfg,
        auth=auth,
        status=status,
        gateway=gateway,
        cache=cache,
        history=history,
        controller=controller,
        commands=CommandDispatcher(gateway, status),
    )


def list_path(cfg: Config, segments: Iterable[str]) -> Dict[str, Any]:
    """Resolve a path and classify its children.

    Returns a dict with keys: path, children (name, has_children), range
    (is_range, extras) and auth_required. Raises FetchError if the listing
    itself cannot be loaded.
    """

    async def _run() -> Dict[str, Any]:
        nav = build_navigator(cfg)
        try:
            await nav.controller.navigate_to(segments, record=False)
        finally:
            await nav.aclose()
        ctl = nav.controller
        if ctl.last_error is not None:
            raise ctl.last_error

        info = ctl.range_info
        children: List[Dict[str, Any]] = []
        for name in ctl.items:
            child = ctl.child_info.get(name)
            children.append(
                {
                    "name": name,
                    "has_children": None if (info.is_range or child is None) else child.has_children,
                }
            )
        return {
            "path": paths.encode(ctl.current_path),
            "children": children,
            "range": {"is_range": info.is_range, "extras": info.extras},
            "auth_required": nav.auth.prompt_required,
        }

    return asyncio.run(_run())


def run_command(cfg: Config, segments: Iterable[str], code: str, value: Optional[str] = None) -> Dict[str, Any]:
    """Send a command and return what the status channel recorded."""

    async def _run() -> Dict[str, Any]:
        nav = build_navigator(cfg)
        try:
            entry = await nav.commands.execute(segments, code, value)
        finally:
            await nav.aclose()
        return {
            "label": entry.label,
            "response": entry.text,
            "auth_required": nav.auth.prompt_required,
        }

    return asyncio.run(_run())


def cached_listings(cfg: Config) -> Dict[str, List[str]]:
    return ListingCache(cfg.cache_path).load().snapshot()


def clear_cache(cfg: Config) -> str:
    return ListingCache(cfg.cache_path).clear().value


def set_credentials(cfg: Config, username: str, password: str) -> None:
    AuthState(cfg.credentials_path).set_credentials(username, password)


def clear_credentials(cfg: Config) -> None:
    AuthState(cfg.credentials_path).clear()
