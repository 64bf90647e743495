"""
fairdice.beacon.schema
----------------------

pydantic views over the beacon's JSON wire format.

- LatestRoundPayload : body of ``GET /v1/randomness/latest``
- VerifyRequest      : body of ``POST /v1/verify/{round}``
- VerifyResponse     : body returned by the verify endpoint

These only check structure and types. Content rules (randomness must be hex)
are enforced by :class:`fairdice.types.core.RandomnessRound` so a structurally
valid but non-hex round surfaces as a format error rather than a transport
failure.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from fairdice.types.core import RandomnessRound, RoundId, RoundSource


class LatestRoundPayload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    round: int = Field(..., gt=0, description="Beacon round number.")
    randomness: str = Field(..., description="Hex-encoded entropy.")
    signature: str = Field(..., description="Opaque round signature.")
    threshold_proof: str = Field(..., description="Opaque threshold attestation.")
    committee_id: Optional[str] = Field(default=None, description="Signing committee id.")
    unix_time: int = Field(..., ge=0, description="Production time, unix seconds.")

    @field_validator("committee_id", mode="before")
    @classmethod
    def _committee_as_str(cls, v: Any) -> Optional[str]:
        # some beacons report numeric committee ids
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        raise ValueError("committee_id must be a string or integer")

    def to_round(self) -> RandomnessRound:
        """Build the domain record; raises MalformedInputError on non-hex randomness."""
        return RandomnessRound(
            round=RoundId(self.round),
            randomness=self.randomness,
            signature=self.signature,
            threshold_proof=self.threshold_proof,
            unix_time=self.unix_time,
            committee_id=self.committee_id,
            source=RoundSource.BEACON,
        )


class VerifyRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    signature: str
    randomness: str
    round: int


class VerifyResponse(BaseModel):
    """Only a literal JSON ``true`` counts as valid."""

    model_config = ConfigDict(extra="ignore")

    valid: Optional[StrictBool] = None

    @property
    def is_valid(self) -> bool:
        return self.valid is True


__all__ = ["LatestRoundPayload", "VerifyRequest", "VerifyResponse"]
