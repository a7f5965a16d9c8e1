"""Parsing helpers for identifiers embedded in API payloads.

The API links resources by canonical URL (``.../character/42``) rather than by
id. These helpers recover the integer ids from those links and split episode
codes (``S01E07``) into season and episode numbers. None of them raise: every
malformed input degrades to a sentinel value.
"""

from __future__ import annotations

import re
from typing import Any

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _leading_int(text: str) -> int | None:
    """Parse the leading integer of ``text``: ``'12abc'`` → 12, ``'abc'`` → None.

    Leading whitespace and a sign are accepted. Values outside the signed
    32-bit range are rejected.
    """
    match = _LEADING_INT_RE.match(text)
    if match is None:
        return None
    value = int(match.group(1))
    if value < _INT32_MIN or value > _INT32_MAX:
        return None
    return value


def extract_id_from_url(url: str) -> int:
    """Return the numeric id in the last path segment of ``url``, or -1."""
    if not url:
        return -1
    pos = url.rfind("/")
    if pos == -1 or pos + 1 >= len(url):
        return -1
    value = _leading_int(url[pos + 1 :])
    return -1 if value is None else value


def parse_episode_code(code: str) -> tuple[int, int]:
    """Split ``'S05E03'`` into ``(5, 3)``. Unparseable codes yield ``(0, 0)``."""
    if len(code) < 6 or not code.startswith("S"):
        return 0, 0
    season = _leading_int(code[1:3])
    number = _leading_int(code[4:6])
    if season is None or number is None:
        return 0, 0
    return season, number


def link_ids(value: Any) -> Any:
    """Convert a list of resource URLs into their ids.

    A bare string is treated as a one-element list. Anything else that is not a
    list is returned unchanged so model validation reports it.
    """
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return value
    ids: list[int] = []
    for link in value:
        if not isinstance(link, str):
            raise ValueError(f"expected a resource URL, got {type(link).__name__}")
        ids.append(extract_id_from_url(link))
    return ids
