"""Detect listings that are really a 0-100 numeric control."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

RANGE_MIN = 0
RANGE_MAX = 100
MIN_NUMERIC_ENTRIES = 50


@dataclass(frozen=True)
class RangeInfo:
    is_range: bool = False
    extras: List[str] = field(default_factory=list)


def _as_int(item: str) -> Optional[int]:
    # Number()-style parsing: surrounding whitespace ok, "50.0" is 50, "" is not a number
    text = item.strip()
    if not text or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or not value.is_integer():
        return None
    return int(value)


def analyze_numeric_range(items: Iterable[str]) -> RangeInfo:
    nums: List[int] = []
    extras: List[str] = []
    for item in items:
        n = _as_int(item)
        if n is not None and RANGE_MIN <= n <= RANGE_MAX:
            nums.append(n)
        else:
            extras.append(item)

    if not nums:
        return RangeInfo(is_range=False, extras=[])
    if min(nums) == RANGE_MIN and max(nums) == RANGE_MAX and len(nums) >= MIN_NUMERIC_ENTRIES:
        return RangeInfo(is_range=True, extras=extras)
    return RangeInfo(is_range=False, extras=[])
