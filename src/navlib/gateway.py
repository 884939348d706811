"""Authenticated request gateway over httpx.

Every call goes through :meth:`Gateway.send`, which attaches credentials,
parses JSON bodies best-effort and reports auth faults. It never raises for
HTTP or transport errors; callers look at ``ok``/``status`` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import httpx

from .auth import AuthState
from .status import StatusChannel

logger = logging.getLogger(__name__)

UNAUTHORIZED = 401


@dataclass(frozen=True)
class GatewayResponse:
    ok: bool
    status: int
    json: Any
    text: str
    url: str = ""
    method: str = "GET"


class Gateway:
    def __init__(
        self,
        base_url: str,
        auth: Optional[AuthState] = None,
        status: Optional[StatusChannel] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth = auth or AuthState()
        self.status = status or StatusChannel()
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def url_for(self, path: str) -> str:
        return self.base_url + path

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def send(
        self,
        path: str,
        method: str = "GET",
        headers: Optional[Mapping[str, str]] = None,
        body: Union[str, bytes, None] = None,
    ) -> GatewayResponse:
        method = method.upper()
        url = self.url_for(path)
        logger.debug("%s %s", method, url)
        try:
            res = await self.client.request(
                method,
                url,
                headers=dict(headers or {}),
                content=body,
                auth=self.auth.basic_auth(),
            )
        except httpx.HTTPError as e:
            logger.info("%s %s failed: %s", method, url, e)
            self.status.set_result(f"{method} {url}", str(e))
            return GatewayResponse(ok=False, status=0, json=None, text=str(e), url=url, method=method)

        text = res.text
        try:
            payload = res.json() if text else None
        except ValueError:
            # non-JSON bodies are fine, they just have no json payload
            payload = None

        if res.status_code == UNAUTHORIZED:
            logger.info("Auth fault on %s %s", method, url)
            self.auth.require_prompt()
            self.status.set_result(f"{method} {url}", f"{res.status_code} {text or '(no body)'}")

        return GatewayResponse(
            ok=res.is_success,
            status=res.status_code,
            json=payload,
            text=text,
            url=url,
            method=method,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Gateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
