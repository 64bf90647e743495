"""
fairdice.utils: hex/bytes helpers and presentation formatting.
"""

from __future__ import annotations

from .bytes import distinct_ratio, from_hex, is_hex, shannon_entropy
from .fmt import format_hash, format_timestamp, relative_time, utc_from_unix

__all__ = [
    "from_hex",
    "is_hex",
    "distinct_ratio",
    "shannon_entropy",
    "format_hash",
    "format_timestamp",
    "relative_time",
    "utc_from_unix",
]
