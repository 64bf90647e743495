"""Shared builders and fakes for the fairdice tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fairdice.metrics import Metrics
from fairdice.types.core import RandomnessRound, RoundId, RoundSource

BEACON_URL = "https://beacon.test"
LATEST_URL = BEACON_URL + "/v1/randomness/latest"

# 32 distinct bytes; first byte 0x00 → face 1
GOOD_RANDOMNESS = bytes(range(32)).hex()
# first byte 0x05 → face 6
FACE_SIX_RANDOMNESS = bytes(range(5, 37)).hex()
REPETITIVE_RANDOMNESS = "aa" * 32
ALL_FF_RANDOMNESS = "ff" * 32

SIGNATURE = "a1b2c3d4e5f60718293a4b5c6d7e8f90"
THRESHOLD_PROOF = "proof-7f3e2a91c0d4"


def verify_url(round_id: int) -> str:
    return f"{BEACON_URL}/v1/verify/{round_id}"


def beacon_payload(round_id: int = 1001, randomness: str = GOOD_RANDOMNESS, **overrides: Any) -> Dict[str, Any]:
    """JSON body as served by GET /v1/randomness/latest."""
    body: Dict[str, Any] = {
        "round": round_id,
        "randomness": randomness,
        "signature": SIGNATURE,
        "threshold_proof": THRESHOLD_PROOF,
        "committee_id": "committee-alpha",
        "unix_time": 1_700_000_000 + round_id,
    }
    body.update(overrides)
    return body


def make_round(
    round_id: int = 1001,
    randomness: str = GOOD_RANDOMNESS,
    source: RoundSource = RoundSource.BEACON,
) -> RandomnessRound:
    return RandomnessRound(
        round=RoundId(round_id),
        randomness=randomness,
        signature=SIGNATURE,
        threshold_proof=THRESHOLD_PROOF,
        unix_time=1_700_000_000 + round_id,
        committee_id="committee-alpha",
        source=source,
    )


class _NullClient:
    async def close(self) -> None:
        pass


class FakeSource:
    """
    Stand-in for RandomnessSource that serves queued rounds.

    A queued ``(asyncio.Event, round)`` pair makes ``latest()`` block until the
    event is set; a queued exception is raised.
    """

    def __init__(self, rounds: Optional[List[Any]] = None) -> None:
        self.queue: List[Any] = list(rounds or [])
        self.calls = 0
        self.client = _NullClient()

    async def latest(self) -> RandomnessRound:
        self.calls += 1
        item = self.queue.pop(0)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, tuple):
            gate, rnd = item
            await gate.wait()
            return rnd
        return item


def sample(metrics: Metrics, name: str, **labels: str) -> float:
    """Read one sample from the metrics' registry (0.0 when absent)."""
    return metrics.registry.get_sample_value(name, labels) or 0.0
