from __future__ import annotations

from fairdice.cli import main

main()
