"""
fairdice: verifiable dice rolls from a threshold randomness beacon.

The package turns a published beacon round into an unbiased die face and lets
callers check that the round was really published and threshold-signed:

- ``fairdice.converter``      rejection-sampled hex → integer conversion,
- ``fairdice.beacon``         beacon transport, wire schema and the round source,
- ``fairdice.verify``         the ordered verification protocol,
- ``fairdice.engine``         roll orchestration and bounded history.

Only light, stable exports are surfaced here to avoid import cycles.
"""

from __future__ import annotations

from .version import __version__

__all__ = ["__version__"]
