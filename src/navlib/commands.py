"""Dispatch mutating ``?code=...`` commands against a path."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from . import paths
from .status import StatusChannel, StatusEntry

if TYPE_CHECKING:
    from .gateway import Gateway

logger = logging.getLogger(__name__)


def build_query(segments: Iterable[str], code: str, extra_value: Optional[str] = None) -> str:
    query = paths.encode(segments) + "?code=" + paths.quote_component(code)
    if extra_value is not None and extra_value != "":
        query += "&value=" + paths.quote_component(extra_value)
    return query


class CommandDispatcher:
    """Sends commands and writes every outcome to the status channel.

    Failures are shown, not raised: the channel holds either the response
    body or a ``"<status> <text>"`` line.
    """

    def __init__(self, gateway: "Gateway", status: Optional[StatusChannel] = None) -> None:
        self.gateway = gateway
        self.status = status or gateway.status

    async def execute(
        self,
        segments: Iterable[str],
        code: str,
        extra_value: Optional[str] = None,
    ) -> StatusEntry:
        query = build_query(segments, code, extra_value)
        res = await self.gateway.send(query, method="POST")
        label = f"POST {self.gateway.url_for(query)}"

        if not res.ok or res.status != 200:
            logger.info("Command %s failed with status %s", query, res.status)
            return self.status.set_result(label, f"{res.status} {res.text or ''}")

        body = res.json if res.json is not None else (res.text or "")
        return self.status.set_result(label, body)
