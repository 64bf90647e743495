"""
fairdice.tests
--------------
Test package for fairdice.

Notes:
- Beacon traffic is mocked with respx; nothing here talks to a real beacon.
- Signatures and proofs are opaque placeholders, not real threshold signatures.
"""

from __future__ import annotations

__all__: tuple[str, ...] = ()
