"""
fairdice.beacon
===============

Everything that talks to, or stands in for, the randomness beacon:

- ``client``  : async HTTP transport (latest round, per-round verify)
- ``schema``  : pydantic models for the beacon JSON
- ``source``  : RandomnessSource with the local demo fallback
- ``history`` : bounded, most-recent-first roll history
"""

from __future__ import annotations

from .client import BeaconClient
from .history import RollHistory
from .source import RandomnessSource, generate_demo_round

__all__ = [
    "BeaconClient",
    "RandomnessSource",
    "RollHistory",
    "generate_demo_round",
]
