"""
fairdice.types
==============

Re-exports of the core record and verdict types so callers can write
``from fairdice.types import RollRecord``.
"""

from __future__ import annotations

from .core import (
    LocalFallback,
    RandomnessRound,
    Remote,
    RollRecord,
    RoundId,
    RoundSource,
    VerificationOutcome,
    VerificationVerdict,
    is_valid_round,
)

__all__ = [
    "RoundId",
    "RoundSource",
    "is_valid_round",
    "RandomnessRound",
    "RollRecord",
    "Remote",
    "LocalFallback",
    "VerificationOutcome",
    "VerificationVerdict",
]
