"""Conversion between location tokens (``#/a/b``) and path segment tuples."""

from __future__ import annotations

import re
from typing import Iterable, Tuple
from urllib.parse import quote, unquote

Segments = Tuple[str, ...]

ROOT: Segments = ()
LOCATION_PREFIX = "#/"

# Same set encodeURIComponent leaves alone (on top of quote's unreserved set)
SAFE_CHARS = "!~*'()"
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def quote_component(value: object) -> str:
    """Percent-encode one segment or query value like ``encodeURIComponent``."""
    return quote(str(value), safe=SAFE_CHARS)


def as_path(segments: Iterable[str]) -> Segments:
    return tuple(segments)


def encode(segments: Iterable[str]) -> str:
    """Serialise segments as ``/seg1/seg2``; the root is ``/``.

    An empty segment serialises to nothing, so ``("",)`` shares the root's key.
    """
    parts = [quote_component(s) for s in segments]
    if not parts:
        return "/"
    return "/" + "/".join(parts)


def decode(token: str) -> Segments:
    """Parse a location token back into segments.

    Only tokens starting with ``#/`` are path-like. Anything else, and any
    token with a broken percent escape, decodes to the root.
    """
    if not token or not token.startswith(LOCATION_PREFIX):
        return ROOT
    body = token[len(LOCATION_PREFIX):]
    if not body:
        return ROOT
    segments = []
    for raw in body.split("/"):
        if not raw:
            continue
        if _BAD_ESCAPE.search(raw):
            return ROOT
        try:
            segments.append(unquote(raw, errors="strict"))
        except UnicodeDecodeError:
            return ROOT
    return tuple(segments)


def to_location(segments: Iterable[str]) -> str:
    return "#" + encode(segments)


def parse_user_path(text: str) -> Segments:
    """Accept ``#/a/b``, ``/a/b`` or ``a/b`` as typed on a command line."""
    text = (text or "").strip()
    if text.startswith("#"):
        return decode(text)
    return decode(LOCATION_PREFIX + text.lstrip("/"))


def child_path(segments: Iterable[str], name: str) -> Segments:
    return (*segments, name)


def parent_path(segments: Iterable[str]) -> Segments:
    return tuple(segments)[:-1]
