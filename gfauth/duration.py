"""Parsing of short human-written durations such as ``5d`` or ``1y``."""

from __future__ import annotations

import re
from datetime import timedelta

SECOND_DEF = "s"
MINUTE_DEF = "m"
HOUR_DEF = "h"
DAY_DEF = "d"
YEAR_DEF = "y"

DAY = timedelta(hours=24)
YEAR = DAY * 365

_MAX_INT64 = 2**63 - 1

_UNITS = tuple(
    (re.compile(rf"([0-9]+){suffix}"), unit)
    for suffix, unit in (
        (SECOND_DEF, timedelta(seconds=1)),
        (MINUTE_DEF, timedelta(minutes=1)),
        (HOUR_DEF, timedelta(hours=1)),
        (DAY_DEF, DAY),
        (YEAR_DEF, YEAR),
    )
)


def parse_to_duration(s: str) -> timedelta:
    """Parse ``<number><unit>`` where unit is one of s, m, h, d or y."""
    for pattern, unit in _UNITS:
        match = pattern.fullmatch(s)
        if match is None:
            continue
        count = int(match.group(1))
        if count > _MAX_INT64:
            raise ValueError(f"value out of range: {s!r}")
        try:
            return count * unit
        except OverflowError as exc:
            raise ValueError(f"duration out of range: {s!r}") from exc
    raise ValueError("Unable to parse")