"""
fairdice constants.

This module centralizes:
- Beacon endpoint defaults
- Demo (local fallback) markers shared by the source and the verifier
- Verification thresholds (kept in sync with config defaults)
- Sampling and history sizes

Operational knobs may be overridden via `fairdice.config.DiceConfig`, but code
that needs stable defaults can import from here.
"""

from __future__ import annotations

# -----------------------------
# Beacon endpoints
# -----------------------------
DEFAULT_BEACON_URL: str = "https://api.dcipher.network"
LATEST_ROUND_PATH: str = "/v1/randomness/latest"
VERIFY_ROUND_PATH: str = "/v1/verify/{round}"

# Total wall-clock budget for one beacon call (seconds).
DEFAULT_TIMEOUT_S: float = 5.0

# -----------------------------
# Demo markers
# -----------------------------
# Keep these stable; the verifier recognizes rounds produced by the local
# fallback through these prefixes.
DEMO_SIGNATURE_PREFIX: str = "demo_signature_"
DEMO_THRESHOLD_PROOF_PREFIX: str = "demo_threshold_proof_"
DEMO_COMMITTEE_PREFIX: str = "committee_"
DEMO_RANDOMNESS_BYTES: int = 32

# -----------------------------
# Verification thresholds
# -----------------------------
MIN_SIGNATURE_LEN: int = 10
MIN_RANDOMNESS_HEX_LEN: int = 32
MIN_DISTINCT_HEX_CHARS: int = 8
MIN_DISTINCT_BYTE_RATIO: float = 0.5

# -----------------------------
# Sampling / history
# -----------------------------
DEFAULT_SIDES: int = 6
MAX_SIDES: int = 256  # a single byte carries 256 outcomes
HISTORY_CAPACITY: int = 8
DEFAULT_MAX_REFETCH: int = 3

__all__ = [
    "DEFAULT_BEACON_URL",
    "LATEST_ROUND_PATH",
    "VERIFY_ROUND_PATH",
    "DEFAULT_TIMEOUT_S",
    "DEMO_SIGNATURE_PREFIX",
    "DEMO_THRESHOLD_PROOF_PREFIX",
    "DEMO_COMMITTEE_PREFIX",
    "DEMO_RANDOMNESS_BYTES",
    "MIN_SIGNATURE_LEN",
    "MIN_RANDOMNESS_HEX_LEN",
    "MIN_DISTINCT_HEX_CHARS",
    "MIN_DISTINCT_BYTE_RATIO",
    "DEFAULT_SIDES",
    "MAX_SIDES",
    "HISTORY_CAPACITY",
    "DEFAULT_MAX_REFETCH",
]
