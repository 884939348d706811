from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from navlib.auth import AuthState
from navlib.gateway import GatewayResponse
from navlib.status import StatusChannel


def ok(*names: str) -> Tuple[int, Any]:
    return 200, {"data": list(names)}


class FakeGateway:
    """In-memory stand-in for navlib.gateway.Gateway.

    ``routes`` maps a request path (query included) to ``(status, body)``.
    ``hold(path)`` makes requests for that path wait until the returned
    event is set, so tests can interleave navigations.
    """

    def __init__(self, routes: Optional[Dict[str, Tuple[int, Any]]] = None, auth: Optional[AuthState] = None):
        self.base_url = "http://api.test/v2"
        self.routes: Dict[str, Tuple[int, Any]] = dict(routes or {})
        self.calls: List[Tuple[str, str]] = []
        self.auth = auth or AuthState()
        self.status = StatusChannel()
        self.gates: Dict[str, asyncio.Event] = {}
        self.requested: Dict[str, asyncio.Event] = {}

    def url_for(self, path: str) -> str:
        return self.base_url + path

    def hold(self, path: str) -> asyncio.Event:
        self.gates[path] = asyncio.Event()
        self.requested[path] = asyncio.Event()
        return self.gates[path]

    def get_calls(self, path: str) -> int:
        return self.calls.count(("GET", path))

    async def send(self, path: str, method: str = "GET", headers=None, body=None) -> GatewayResponse:
        self.calls.append((method, path))
        if path in self.requested:
            self.requested[path].set()
        if path in self.gates:
            await self.gates[path].wait()

        status, payload = self.routes.get(path, (404, "not found"))
        if status == 401:
            self.auth.require_prompt()
        if isinstance(payload, str):
            text, parsed = payload, None
        else:
            text, parsed = json.dumps(payload), payload
        return GatewayResponse(
            ok=200 <= status < 300,
            status=status,
            json=parsed,
            text=text,
            url=self.url_for(path),
            method=method,
        )


def write_config(tmp_path: Path, **extra: Any) -> Path:
    cfg = tmp_path / "config.yaml"
    lines = [
        "version: 1",
        "base_url: http://api.test/v2",
        f"cache_path: {tmp_path / 'cache' / 'listings.json'}",
        f"credentials_path: {tmp_path / 'credentials.json'}",
    ]
    for key, value in extra.items():
        lines.append(f"{key}: {value}")
    cfg.write_text("\n".join(lines) + "\n")
    return cfg
