"""
Individual verification checks.

Pure, synchronous predicates used by :class:`fairdice.verify.verifier.ProofVerifier`.
None of them raise on bad input; a malformed value is simply a failed check.

The demo shortcuts below are placeholders for real threshold-signature
verification (BLS aggregation, committee membership, Lagrange interpolation).
They are not a security contract.
"""

from __future__ import annotations

from typing import Optional

from fairdice.config import VerifierConfig
from fairdice.constants import DEMO_SIGNATURE_PREFIX
from fairdice.types.core import is_valid_round
from fairdice.utils.bytes import distinct_ratio, is_hex, strip_0x

REASON_SIGNATURE_FORMAT = "invalid signature format"
REASON_MISSING_PROOF = "missing threshold proof"
REASON_REMOTE_REJECTED = "beacon rejected signature"
REASON_LOCAL_REJECTED = "local authenticity check failed"
REASON_RANDOMNESS = "randomness failed property checks"
REASON_ERROR = "verification error"


def is_demo_signature(signature: object) -> bool:
    return isinstance(signature, str) and signature.startswith(DEMO_SIGNATURE_PREFIX)


def check_signature_format(signature: object, cfg: VerifierConfig) -> Optional[str]:
    """S0. Returns a failure reason, or None when the signature is well-formed."""
    if not isinstance(signature, str) or len(signature) < cfg.min_signature_len:
        return REASON_SIGNATURE_FORMAT
    return None


def check_threshold_proof(proof: object) -> Optional[str]:
    """
    S1. Presence only; demo proofs are non-empty strings and pass.

    A real proof would be checked here against the committee's aggregated
    public key.
    """
    if not isinstance(proof, str) or not proof:
        return REASON_MISSING_PROOF
    return None


def local_authenticity(round_id: object, signature: object, randomness: object, cfg: VerifierConfig) -> bool:
    """
    S3. Coarse authenticity heuristic, used only when the beacon is unreachable.

    Demo-tagged signatures are accepted so the local fallback of the source
    verifies end to end; everything else needs enough randomness characters
    with enough distinct symbols.
    """
    if not is_valid_round(round_id) or not signature or not randomness:
        return False
    if is_demo_signature(signature):
        return True
    if not isinstance(randomness, str):
        return False
    body = strip_0x(randomness)
    if len(body) < cfg.min_randomness_hex:
        return False
    return len(set(body)) >= cfg.min_distinct_chars


def randomness_properties(randomness: object, cfg: VerifierConfig) -> bool:
    """
    S4. Always run: hex, long enough, and at least
    ``min_distinct_byte_ratio`` of the decoded bytes distinct.
    """
    if not is_hex(randomness):
        return False
    body = strip_0x(randomness)  # type: ignore[arg-type]
    if len(body) < cfg.min_randomness_hex:
        return False
    data = bytes.fromhex(body)
    return distinct_ratio(data) >= cfg.min_distinct_byte_ratio


__all__ = [
    "REASON_SIGNATURE_FORMAT",
    "REASON_MISSING_PROOF",
    "REASON_REMOTE_REJECTED",
    "REASON_LOCAL_REJECTED",
    "REASON_RANDOMNESS",
    "REASON_ERROR",
    "is_demo_signature",
    "check_signature_format",
    "check_threshold_proof",
    "local_authenticity",
    "randomness_properties",
]
