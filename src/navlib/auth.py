"""Credential state shared by the gateway and the navigation controller."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    username: str = ""
    password: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.username.strip() and not self.password


class AuthState:
    """Holds credentials, the auth prompt flag and a change counter.

    ``version`` increases each time credentials are supplied or cleared.
    Subscribers are called with the new version; prompt listeners are called
    every time a request comes back with an auth fault.
    """

    def __init__(self, credentials_path: Optional[Path] = None) -> None:
        self.credentials_path = credentials_path
        self.version = 0
        self.prompt_required = False
        self._credentials = Credentials()
        self._loaded = False
        self._subscribers: List[Callable[[int], None]] = []
        self._prompt_listeners: List[Callable[[], None]] = []

    @property
    def credentials(self) -> Credentials:
        self._load()
        return self._credentials

    def _load(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if self.credentials_path is None or not self.credentials_path.is_file():
            return
        try:
            raw = json.loads(self.credentials_path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable credentials file %s: %s", self.credentials_path, e)
            return
        if isinstance(raw, dict):
            self._credentials = Credentials(
                username=str(raw.get("username") or ""),
                password=str(raw.get("password") or ""),
            )

    def _save(self) -> bool:
        if self.credentials_path is None:
            return False
        try:
            self.credentials_path.parent.mkdir(parents=True, exist_ok=True)
            self.credentials_path.write_text(
                json.dumps(
                    {"username": self._credentials.username, "password": self._credentials.password}
                )
            )
            self.credentials_path.chmod(0o600)
        except OSError as e:
            logger.warning("Could not persist credentials to %s: %s", self.credentials_path, e)
            return False
        return True

    def basic_auth(self) -> Optional[httpx.BasicAuth]:
        creds = self.credentials
        if creds.is_empty:
            return None
        return httpx.BasicAuth(creds.username.strip(), creds.password)

    def set_credentials(self, username: str, password: str) -> int:
        self._loaded = True
        self._credentials = Credentials(username=username, password=password)
        self._save()
        self.prompt_required = False
        return self._bump()

    def clear(self) -> int:
        self._loaded = True
        self._credentials = Credentials()
        if self.credentials_path is not None and self.credentials_path.exists():
            try:
                self.credentials_path.unlink()
            except OSError as e:
                logger.warning("Could not remove %s: %s", self.credentials_path, e)
        return self._bump()

    def _bump(self) -> int:
        self.version += 1
        logger.info("Credentials changed (version %d)", self.version)
        for callback in list(self._subscribers):
            callback(self.version)
        return self.version

    def require_prompt(self) -> None:
        self.prompt_required = True
        for callback in list(self._prompt_listeners):
            callback()

    def close_prompt(self) -> None:
        self.prompt_required = False

    def subscribe(self, callback: Callable[[int], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[int], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def on_prompt(self, callback: Callable[[], None]) -> None:
        self._prompt_listeners.append(callback)
