"""
fairdice.utils.bytes
====================

Small utilities for hex/bytes handling and coarse entropy measures.
Stdlib only and deterministic.

Highlights
----------
- :func:`from_hex` strict decode raising :class:`MalformedInputError`.
- :func:`is_hex` non-raising predicate (optionally length-checked).
- :func:`distinct_ratio` / :func:`shannon_entropy` for repetition checks.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable, Sequence

from fairdice.errors import MalformedInputError

__all__ = [
    "from_hex",
    "is_hex",
    "strip_0x",
    "distinct_ratio",
    "shannon_entropy",
]

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def is_hex(s: object, *, require_even: bool = True) -> bool:
    """
    Return True if *s* is a non-empty hex string with an optional ``0x`` prefix.
    """
    if not isinstance(s, str):
        return False
    body = strip_0x(s)
    if not body or not _HEX_RE.fullmatch(body):
        return False
    return not require_even or len(body) % 2 == 0


def from_hex(s: str) -> bytes:
    """
    Convert a hex string (optional ``0x``) to bytes.

    Strict rules: no whitespace, only 0-9a-fA-F, even nibble count, non-empty.
    """
    if not isinstance(s, str):
        raise MalformedInputError(repr(s), "not-a-string")
    body = strip_0x(s)
    if not body:
        raise MalformedInputError(s, "empty")
    if not _HEX_RE.fullmatch(body):
        raise MalformedInputError(s, "non-hex")
    if len(body) % 2 != 0:
        raise MalformedInputError(s, "odd-length")
    return bytes.fromhex(body)


def distinct_ratio(items: Sequence[object]) -> float:
    """Fraction of distinct values in *items* (0.0 for an empty sequence)."""
    if not items:
        return 0.0
    return len(set(items)) / len(items)


def shannon_entropy(symbols: Iterable[object]) -> float:
    """
    Shannon entropy of the symbol distribution, in bits per symbol.

    For a hex string this is at most 4.0; for raw bytes at most 8.0.
    """
    counts = Counter(symbols)
    total = sum(counts.values())
    if total == 0:
        return 0.0
    h = 0.0
    for c in counts.values():
        p = c / total
        h -= p * math.log2(p)
    return h
