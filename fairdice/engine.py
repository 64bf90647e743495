"""
fairdice.engine
===============

RollEngine owns the "current roll" and the bounded history, and wires the
randomness source, the converter and the verifier together.

    async with RollEngine.from_config(DiceConfig()) as engine:
        record = await engine.roll()
        verdict = await engine.verify_current()

Concurrency
-----------
All state lives on the engine instance. Mutations happen between awaits on a
single event loop, so they are serialized. Each ``roll()`` takes a
monotonically increasing roll id; a roll that finishes after a newer roll has
already been applied is returned to its caller but does not replace
``current`` or enter the history.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fairdice.beacon.client import BeaconClient
from fairdice.beacon.history import RollHistory
from fairdice.beacon.source import RandomnessSource
from fairdice.config import DiceConfig, EngineConfig
from fairdice.converter import to_die_face
from fairdice.errors import DiceError, InsufficientEntropyError, NoRollError
from fairdice.metrics import METRICS, Metrics
from fairdice.types.core import RandomnessRound, RollRecord, VerificationVerdict
from fairdice.verify.verifier import ProofVerifier

logger = logging.getLogger(__name__)


class RollEngine:
    def __init__(
        self,
        source: RandomnessSource,
        verifier: ProofVerifier,
        config: Optional[EngineConfig] = None,
        *,
        metrics: Metrics = METRICS,
    ) -> None:
        self._source = source
        self._verifier = verifier
        self._cfg = config or EngineConfig()
        self._metrics = metrics
        self._history = RollHistory(self._cfg.history_capacity)
        self._current: Optional[RollRecord] = None
        self._issued = 0   # last roll id handed out
        self._applied = 0  # roll id of `_current`

    @classmethod
    def from_config(
        cls,
        config: DiceConfig,
        *,
        client: Optional[BeaconClient] = None,
        metrics: Metrics = METRICS,
    ) -> "RollEngine":
        """Build source, verifier and engine sharing one beacon client."""
        beacon = client or BeaconClient(config.beacon, metrics=metrics)
        return cls(
            RandomnessSource(beacon),
            ProofVerifier(beacon, config.verifier, metrics=metrics),
            config.engine,
            metrics=metrics,
        )

    # ------------------------ lifecycle ------------------------

    async def close(self) -> None:
        await self._source.client.close()

    async def __aenter__(self) -> "RollEngine":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------ state ------------------------

    @property
    def current(self) -> Optional[RollRecord]:
        return self._current

    @property
    def history(self) -> List[RollRecord]:
        """Retained rolls, most recent first."""
        return self._history.snapshot()

    @property
    def sides(self) -> int:
        return self._cfg.sides

    # ------------------------ operations ------------------------

    async def roll(self) -> RollRecord:
        """
        Fetch a round, convert it to a die face and record it.

        Conversion/format errors (MalformedInputError, and
        InsufficientEntropyError in strict mode) propagate as a failed roll and
        leave the engine state untouched.
        """
        self._issued += 1
        roll_id = self._issued
        try:
            rnd, face = await self._draw()
        except DiceError:
            self._metrics.record_roll("failed")
            logger.exception("roll %d failed", roll_id)
            raise

        record = RollRecord.from_round(rnd, face)
        if roll_id > self._applied:
            self._applied = roll_id
            self._current = record
            self._history.push(record)
        else:
            logger.info("discarding stale roll %d (roll %d already applied)", roll_id, self._applied)
        self._metrics.record_roll(rnd.source.value)
        logger.info("rolled %d from %s round %d", face, rnd.source.value, rnd.round)
        return record

    async def verify_current(self) -> VerificationVerdict:
        """Verify the most recent roll; raises NoRollError if there is none."""
        record = self._current
        if record is None:
            raise NoRollError()
        return await self._verifier.verify_record(record)

    # ------------------------ internals ------------------------

    async def _draw(self) -> tuple[RandomnessRound, int]:
        strict = self._cfg.strict_sampling
        refetches = 0
        while True:
            rnd = await self._source.latest()
            try:
                return rnd, to_die_face(rnd.randomness, self._cfg.sides, strict=strict)
            except InsufficientEntropyError:
                if refetches >= self._cfg.max_refetch:
                    raise
                refetches += 1
                logger.info(
                    "round %d had no byte below threshold; refetching (%d/%d)",
                    rnd.round, refetches, self._cfg.max_refetch,
                )


__all__ = ["RollEngine"]
