"""
fairdice.verify
===============

Ordered verification of a beacon round (signature format, threshold proof,
remote or local authenticity, randomness properties).
"""

from __future__ import annotations

from .verifier import ProofVerifier, verdict_message

__all__ = ["ProofVerifier", "verdict_message"]
