"""
fairdice.converter
==================

Deterministic, bias-free conversion of beacon randomness into a bounded integer.

Algorithm (rejection sampling)
------------------------------
1. Decode the hex string into bytes (strict; see :func:`fairdice.utils.bytes.from_hex`).
2. ``threshold = (256 // sides) * sides`` — the largest multiple of *sides*
   that fits in one byte.
3. Scan bytes in order; the first byte ``< threshold`` yields ``byte % sides``.
4. If no byte qualifies, return ``bytes[0] % sides``. This fallback carries a
   small residual bias; it is kept for compatibility with previously
   published rolls. Pass ``strict=True`` to get
   :class:`~fairdice.errors.InsufficientEntropyError` instead and re-query the
   source for fresh entropy.

For 32 bytes and ``sides=6`` the fallback probability is ``(4/256)**32``.

Naive ``byte % 6`` is biased because 256 is not a multiple of 6: faces 1-4
would each get 43 byte values while faces 5-6 get 42.
"""

from __future__ import annotations

from typing import Sequence

from fairdice.constants import DEFAULT_SIDES, MAX_SIDES
from fairdice.errors import InsufficientEntropyError
from fairdice.utils.bytes import from_hex

__all__ = [
    "rejection_threshold",
    "avoid_modulo_bias",
    "draw",
    "to_die_face",
]


def rejection_threshold(sides: int) -> int:
    """Largest multiple of *sides* that is <= 256."""
    if not isinstance(sides, int) or isinstance(sides, bool):
        raise TypeError("sides must be int")
    if sides < 1 or sides > MAX_SIDES:
        raise ValueError(f"sides must be in [1, {MAX_SIDES}] (got {sides})")
    return (256 // sides) * sides


def avoid_modulo_bias(data: Sequence[int], sides: int, *, strict: bool = False) -> int:
    """
    Map a byte sequence to ``[0, sides)`` with rejection sampling.

    *data* must be non-empty; every element is a byte value 0..255.
    """
    threshold = rejection_threshold(sides)
    if not data:
        raise ValueError("data must contain at least one byte")
    for b in data:
        if b < threshold:
            return b % sides
    if strict:
        raise InsufficientEntropyError(sides=sides, n_bytes=len(data))
    return data[0] % sides


def draw(random_hex: str, sides: int = DEFAULT_SIDES, *, strict: bool = False) -> int:
    """
    Convert a hex-encoded random string into an integer in ``[0, sides)``.

    Raises MalformedInputError for odd-length, empty or non-hex input.
    """
    return avoid_modulo_bias(from_hex(random_hex), sides, strict=strict)


def to_die_face(random_hex: str, sides: int = DEFAULT_SIDES, *, strict: bool = False) -> int:
    """The 1-based face shown to callers: ``draw(...) + 1``."""
    return draw(random_hex, sides, strict=strict) + 1
