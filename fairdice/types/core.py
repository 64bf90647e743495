"""
Core typed primitives for the dice pipeline.

Plain frozen dataclasses with no third-party imports, used by the beacon
source, the converter, the verifier, the engine and the CLI.

Types provided:
  • RoundId             — integer-typed identifier for a beacon round
  • RoundSource         — where a round came from (beacon or local demo)
  • RandomnessRound     — one round as published by the beacon
  • RollRecord          — a round plus the die face derived from it
  • Remote / LocalFallback — tagged authenticity outcomes
  • VerificationVerdict — final answer of the verification protocol
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, NewType, Optional, Union

from fairdice.errors import MalformedInputError
from fairdice.utils.bytes import is_hex
from fairdice.utils.fmt import utc_from_unix

# ---- Simple newtypes ---------------------------------------------------------

RoundId = NewType("RoundId", int)


class RoundSource(str, Enum):
    BEACON = "beacon"
    DEMO = "demo"


def is_valid_round(value: object) -> bool:
    """True for positive integers (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _require_round(value: object) -> None:
    if not is_valid_round(value):
        raise ValueError(f"round must be a positive int (got {value!r})")


def _require_str(name: str, value: object) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be str")


# ---- Rounds ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RandomnessRound:
    """
    One published randomness round.

    Fields:
      round           — beacon round number (positive, increasing per epoch)
      randomness      — hex-encoded entropy (even length)
      signature       — opaque, network-specific signature encoding
      threshold_proof — opaque attestation that a quorum co-signed
      unix_time       — seconds since epoch when the round was produced
      committee_id    — signing committee identifier, if the beacon reports one
      source          — beacon or local demo fallback
    """

    round: RoundId
    randomness: str
    signature: str
    threshold_proof: str
    unix_time: int
    committee_id: Optional[str] = None
    source: RoundSource = RoundSource.BEACON

    def __post_init__(self) -> None:  # type: ignore[override]
        _require_round(self.round)
        _require_str("signature", self.signature)
        _require_str("threshold_proof", self.threshold_proof)
        if not isinstance(self.randomness, str):
            raise MalformedInputError(repr(self.randomness), "not-a-string")
        if not is_hex(self.randomness):
            raise MalformedInputError(self.randomness, "non-hex")
        if not isinstance(self.unix_time, int) or self.unix_time < 0:
            raise ValueError("unix_time must be a non-negative int")

    @property
    def is_demo(self) -> bool:
        return self.source is RoundSource.DEMO


@dataclass(frozen=True, slots=True)
class RollRecord:
    """
    A roll: every RandomnessRound field plus the derived die face.

    `dice` is a pure function of `randomness`; `timestamp` is `unix_time` as a
    UTC datetime.
    """

    round: RoundId
    randomness: str
    signature: str
    threshold_proof: str
    unix_time: int
    dice: int
    committee_id: Optional[str] = None
    source: RoundSource = RoundSource.BEACON
    timestamp: datetime = field(init=False)

    def __post_init__(self) -> None:  # type: ignore[override]
        if not isinstance(self.dice, int) or self.dice < 1:
            raise ValueError(f"dice must be a positive int (got {self.dice!r})")
        object.__setattr__(self, "timestamp", utc_from_unix(self.unix_time))

    @classmethod
    def from_round(cls, rnd: RandomnessRound, dice: int) -> "RollRecord":
        return cls(
            round=rnd.round,
            randomness=rnd.randomness,
            signature=rnd.signature,
            threshold_proof=rnd.threshold_proof,
            unix_time=rnd.unix_time,
            dice=dice,
            committee_id=rnd.committee_id,
            source=rnd.source,
        )

    def as_round(self) -> RandomnessRound:
        return RandomnessRound(
            round=self.round,
            randomness=self.randomness,
            signature=self.signature,
            threshold_proof=self.threshold_proof,
            unix_time=self.unix_time,
            committee_id=self.committee_id,
            source=self.source,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dice": self.dice,
            "round": int(self.round),
            "randomness": self.randomness,
            "signature": self.signature,
            "threshold_proof": self.threshold_proof,
            "committee_id": self.committee_id,
            "unix_time": self.unix_time,
            "timestamp": self.timestamp.isoformat(),
            "source": self.source.value,
        }


# ---- Verification ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Remote:
    """Authenticity answered by the beacon's verify endpoint."""

    valid: bool
    kind: str = field(default="remote", init=False)


@dataclass(frozen=True, slots=True)
class LocalFallback:
    """Authenticity answered by the local heuristic (beacon unreachable)."""

    valid: bool
    kind: str = field(default="local", init=False)


VerificationOutcome = Union[Remote, LocalFallback]


@dataclass(frozen=True, slots=True)
class VerificationVerdict:
    """
    Result of the verification protocol.

    Fields:
      valid          — final boolean (authenticity AND randomness properties)
      reason         — diagnostic for a negative verdict, None when valid
      authenticity   — tagged remote/local answer, None if the pipeline stopped earlier
      randomness_ok  — outcome of the randomness-property check, None if not reached
    """

    valid: bool
    reason: Optional[str] = None
    authenticity: Optional[VerificationOutcome] = None
    randomness_ok: Optional[bool] = None

    @property
    def degraded(self) -> bool:
        """True when authenticity came from the local fallback."""
        return isinstance(self.authenticity, LocalFallback)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "reason": self.reason,
            "path": self.authenticity.kind if self.authenticity is not None else None,
            "authentic": self.authenticity.valid if self.authenticity is not None else None,
            "randomness_ok": self.randomness_ok,
        }


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
