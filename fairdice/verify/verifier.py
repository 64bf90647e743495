"""
fairdice.verify.verifier
========================

The verification protocol for a beacon round.

Steps run strictly in order and stop at the first disqualifying condition:

  S0  signature format      — non-empty, at least ``min_signature_len`` chars
  S1  threshold proof       — must be present
  S2  remote verification   — POST to the beacon's per-round verify endpoint;
                              a JSON answer is authoritative (``Remote``)
  S3  local verification    — only when S2 is unreachable (``LocalFallback``)
  S4  randomness properties — always run after S2/S3

Final verdict = authenticity AND S4. Cheap syntactic checks run before any
I/O, and the beacon is trusted over local heuristics whenever it answers.

``verify`` never raises: unexpected exceptions are logged and turned into a
negative verdict with reason ``"verification error"``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fairdice.beacon.client import BeaconClient
from fairdice.config import VerifierConfig
from fairdice.errors import NetworkError
from fairdice.metrics import METRICS, Metrics
from fairdice.types.core import (
    LocalFallback,
    Remote,
    RollRecord,
    VerificationOutcome,
    VerificationVerdict,
    is_valid_round,
)
from fairdice.verify import checks

logger = logging.getLogger(__name__)


class ProofVerifier:
    """
    Args:
        client: Beacon client for the remote step. ``None`` runs offline
            (S2 is treated as unreachable).
        config: Thresholds for the local checks.
        metrics: Metrics sink.
    """

    def __init__(
        self,
        client: Optional[BeaconClient] = None,
        config: Optional[VerifierConfig] = None,
        *,
        metrics: Metrics = METRICS,
    ) -> None:
        self._client = client
        self._cfg = config or VerifierConfig()
        self._metrics = metrics

    @property
    def config(self) -> VerifierConfig:
        return self._cfg

    async def verify(
        self,
        round_id: int,
        signature: str,
        threshold_proof: str,
        randomness: str,
    ) -> VerificationVerdict:
        try:
            verdict = await self._run(round_id, signature, threshold_proof, randomness)
        except Exception:
            logger.exception("verification of round %r failed unexpectedly", round_id)
            self._metrics.record_verification("none", "error")
            return VerificationVerdict(valid=False, reason=checks.REASON_ERROR)

        path = verdict.authenticity.kind if verdict.authenticity is not None else "none"
        self._metrics.record_verification(path, "valid" if verdict.valid else "invalid")
        logger.info(
            "round %r verified: valid=%s path=%s reason=%s",
            round_id, verdict.valid, path, verdict.reason,
        )
        return verdict

    async def verify_record(self, record: RollRecord) -> VerificationVerdict:
        return await self.verify(record.round, record.signature, record.threshold_proof, record.randomness)

    # ------------------------ pipeline ------------------------

    async def _run(
        self,
        round_id: int,
        signature: str,
        threshold_proof: str,
        randomness: str,
    ) -> VerificationVerdict:
        # S0
        reason = checks.check_signature_format(signature, self._cfg)
        if reason:
            return VerificationVerdict(valid=False, reason=reason)

        # S1
        reason = checks.check_threshold_proof(threshold_proof)
        if reason:
            return VerificationVerdict(valid=False, reason=reason)

        # S2, falling back to S3
        authenticity = await self._authenticity(round_id, signature, randomness)

        # S4
        randomness_ok = checks.randomness_properties(randomness, self._cfg)

        if not authenticity.valid:
            reason = (
                checks.REASON_REMOTE_REJECTED
                if isinstance(authenticity, Remote)
                else checks.REASON_LOCAL_REJECTED
            )
        elif not randomness_ok:
            reason = checks.REASON_RANDOMNESS
        else:
            reason = None

        return VerificationVerdict(
            valid=authenticity.valid and randomness_ok,
            reason=reason,
            authenticity=authenticity,
            randomness_ok=randomness_ok,
        )

    async def _authenticity(self, round_id: int, signature: str, randomness: str) -> VerificationOutcome:
        if self._client is not None and is_valid_round(round_id):
            try:
                ok = await self._client.verify_round(round_id, signature, randomness)
            except NetworkError as e:
                logger.warning("beacon verification unavailable (%s); using local verification", e)
            else:
                return Remote(ok)
        return LocalFallback(checks.local_authenticity(round_id, signature, randomness, self._cfg))


def verdict_message(verdict: VerificationVerdict) -> str:
    """Human-readable one-liner for a verdict."""
    if verdict.valid:
        msg = "Randomness verified! This roll is proven fair through threshold consensus."
        if verdict.degraded:
            msg += " (beacon unreachable: checked locally)"
        return msg
    return f"Verification failed: {verdict.reason or 'unknown reason'}. This randomness may be invalid."


__all__ = ["ProofVerifier", "verdict_message"]
