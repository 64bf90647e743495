"""
fairdice.beacon.source
======================

The randomness source used by the roll engine.

``latest()`` performs one call to the beacon's latest-round endpoint. When the
beacon cannot be reached (any :class:`NetworkError`) it does not retry; it
immediately returns a locally generated *demo* round:

- ``randomness``      32 bytes from :mod:`secrets`, hex-encoded,
- ``signature``       ``demo_signature_<random>``,
- ``threshold_proof`` ``demo_threshold_proof_<random>``,
- ``committee_id``    ``committee_<0..99>``,
- ``round`` / ``unix_time`` the current unix second.

Demo rounds carry ``source=RoundSource.DEMO`` and the demo prefixes, which the
verifier recognizes on its local path. They are *not* verifiable against the
beacon.

A beacon response that is well-formed but carries non-hex randomness raises
:class:`MalformedInputError`; that is a format error, surfaced as a failed roll.
"""

from __future__ import annotations

import logging
import secrets
import time
from typing import Callable, Optional

from fairdice.beacon.client import BeaconClient
from fairdice.constants import (
    DEMO_COMMITTEE_PREFIX,
    DEMO_RANDOMNESS_BYTES,
    DEMO_SIGNATURE_PREFIX,
    DEMO_THRESHOLD_PROOF_PREFIX,
)
from fairdice.errors import NetworkError
from fairdice.types.core import RandomnessRound, RoundId, RoundSource

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


def generate_demo_round(now: Optional[float] = None, *, n_bytes: int = DEMO_RANDOMNESS_BYTES) -> RandomnessRound:
    """Build a locally generated, clearly tagged substitute round."""
    ts = int(time.time() if now is None else now)
    return RandomnessRound(
        round=RoundId(max(ts, 1)),
        randomness=secrets.token_bytes(n_bytes).hex(),
        signature=DEMO_SIGNATURE_PREFIX + secrets.token_hex(8),
        threshold_proof=DEMO_THRESHOLD_PROOF_PREFIX + secrets.token_hex(8),
        unix_time=ts,
        committee_id=f"{DEMO_COMMITTEE_PREFIX}{secrets.randbelow(100)}",
        source=RoundSource.DEMO,
    )


class RandomnessSource:
    """
    Fetches the latest beacon round, degrading to a demo round on network failure.
    """

    def __init__(self, client: BeaconClient, *, clock: Clock = time.time) -> None:
        self._client = client
        self._clock = clock

    @property
    def client(self) -> BeaconClient:
        return self._client

    async def latest(self) -> RandomnessRound:
        try:
            payload = await self._client.fetch_latest()
        except NetworkError as e:
            logger.warning("beacon unavailable (%s); using demo randomness", e)
            return generate_demo_round(self._clock())
        rnd = payload.to_round()
        logger.debug("fetched beacon round %d", rnd.round)
        return rnd


__all__ = ["RandomnessSource", "generate_demo_round"]
