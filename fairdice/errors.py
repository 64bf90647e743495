"""
Dice pipeline errors.

A small, typed hierarchy of exceptions raised by the roll pipeline
(fetch → convert → record) and by the beacon transport. Callers can catch the
base `DiceError` to handle everything, or the concrete subclasses for more
granular control.

Only conversion/format errors are meant to escape a roll. Transport errors are
recovered inside the source and the verifier; `NoRollError` is a guidance
condition for the caller, not a crash.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class DiceError(Exception):
    """Base class for all fairdice errors."""
    pass


@dataclass(frozen=True)
class MalformedInputError(DiceError, ValueError):
    """
    Raised when a randomness string cannot be decoded into bytes.

    Attributes:
        value: The offending input (truncated for display).
        reason: Short machine-friendly cause ('odd-length', 'non-hex', 'empty', ...).
    """
    value: str
    reason: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        shown = self.value if len(self.value) <= 24 else self.value[:24] + "..."
        return f"MalformedInputError: {self.reason} (value={shown!r})"


@dataclass(frozen=True)
class InsufficientEntropyError(DiceError):
    """
    Raised by strict sampling when no byte of the input falls below the
    rejection threshold.

    Attributes:
        sides: The requested number of outcomes.
        n_bytes: How many bytes were scanned.
    """
    sides: int
    n_bytes: int

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return (
            f"InsufficientEntropyError: no byte below threshold for sides={self.sides} "
            f"in {self.n_bytes} bytes"
        )


@dataclass(frozen=True)
class NetworkError(DiceError):
    """
    Raised by the beacon client when a call cannot produce a usable response.

    Attributes:
        url: Endpoint that was called.
        reason: Explanation ('timeout', 'connect', 'http-503', 'not-json', ...).
        status: HTTP status code when a response was received.
    """
    url: str
    reason: str
    status: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        base = f"NetworkError: {self.reason} url={self.url}"
        return f"{base} status={self.status}" if self.status is not None else base


class NoRollError(DiceError):
    """Raised when verification is requested before any roll was made."""

    def __init__(self, message: str = "no roll to verify") -> None:
        super().__init__(message)


__all__ = [
    "DiceError",
    "MalformedInputError",
    "InsufficientEntropyError",
    "NetworkError",
    "NoRollError",
]
