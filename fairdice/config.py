"""
fairdice configuration.

Three typed sections, each with its own ``validate()``:
- ``beacon``: endpoint base URL, paths, timeout, extra headers
- ``verifier``: thresholds used by the local checks
- ``engine``: die sides, history size, strict sampling

``DiceConfig`` bundles them and loads from ``FAIRDICE_*`` environment
variables or from a JSON/YAML file.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from fairdice.constants import (
    DEFAULT_BEACON_URL,
    DEFAULT_MAX_REFETCH,
    DEFAULT_SIDES,
    DEFAULT_TIMEOUT_S,
    HISTORY_CAPACITY,
    LATEST_ROUND_PATH,
    MAX_SIDES,
    MIN_DISTINCT_BYTE_RATIO,
    MIN_DISTINCT_HEX_CHARS,
    MIN_RANDOMNESS_HEX_LEN,
    MIN_SIGNATURE_LEN,
    VERIFY_ROUND_PATH,
)

# -------------------------
# Sub-configs
# -------------------------


@dataclass
class BeaconConfig:
    """
    Where the randomness beacon lives and how long we wait for it.

    base_url: scheme + host of the beacon API
    latest_path: GET path returning the latest round
    verify_path: POST path template; ``{round}`` is substituted
    timeout_s: total wall-clock budget for a single call
    headers: extra HTTP headers (e.g. an API key)
    """

    base_url: str = DEFAULT_BEACON_URL
    latest_path: str = LATEST_ROUND_PATH
    verify_path: str = VERIFY_ROUND_PATH
    timeout_s: float = DEFAULT_TIMEOUT_S
    headers: Dict[str, str] = field(default_factory=dict)

    def latest_url(self) -> str:
        return self.base_url.rstrip("/") + self.latest_path

    def verify_url(self, round_id: int) -> str:
        return self.base_url.rstrip("/") + self.verify_path.format(round=int(round_id))

    def validate(self) -> None:
        u = urlparse(self.base_url)
        if u.scheme not in {"http", "https"} or not u.netloc:
            raise ValueError("base_url must be an http(s) URL")
        if not self.latest_path.startswith("/"):
            raise ValueError("latest_path must start with '/'")
        if not self.verify_path.startswith("/") or "{round}" not in self.verify_path:
            raise ValueError("verify_path must start with '/' and contain '{round}'")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")


@dataclass
class VerifierConfig:
    """
    Thresholds for the local verification checks.

    min_signature_len: shortest acceptable signature string
    min_randomness_hex: shortest acceptable randomness (hex characters)
    min_distinct_chars: local-fallback entropy floor over hex characters
    min_distinct_byte_ratio: randomness-property floor over decoded bytes
    """

    min_signature_len: int = MIN_SIGNATURE_LEN
    min_randomness_hex: int = MIN_RANDOMNESS_HEX_LEN
    min_distinct_chars: int = MIN_DISTINCT_HEX_CHARS
    min_distinct_byte_ratio: float = MIN_DISTINCT_BYTE_RATIO

    def validate(self) -> None:
        if self.min_signature_len < 1:
            raise ValueError("min_signature_len must be >= 1")
        if self.min_randomness_hex < 2 or self.min_randomness_hex % 2 != 0:
            raise ValueError("min_randomness_hex must be an even number >= 2")
        if not (1 <= self.min_distinct_chars <= 16):
            raise ValueError("min_distinct_chars must be between 1 and 16")
        if not (0.0 < self.min_distinct_byte_ratio <= 1.0):
            raise ValueError("min_distinct_byte_ratio must be in (0.0, 1.0]")


@dataclass
class EngineConfig:
    """
    sides: number of die faces
    history_capacity: how many rolls are retained, most recent first
    strict_sampling: re-fetch entropy instead of taking the biased fallback
    max_refetch: extra fetches allowed per roll when strict_sampling is on
    """

    sides: int = DEFAULT_SIDES
    history_capacity: int = HISTORY_CAPACITY
    strict_sampling: bool = False
    max_refetch: int = DEFAULT_MAX_REFETCH

    def validate(self) -> None:
        if not (1 <= self.sides <= MAX_SIDES):
            raise ValueError(f"sides must be in [1, {MAX_SIDES}]")
        if self.history_capacity <= 0:
            raise ValueError("history_capacity must be > 0")
        if self.max_refetch < 0:
            raise ValueError("max_refetch must be >= 0")


# -------------------------
# Top-level config
# -------------------------


@dataclass
class DiceConfig:
    beacon: BeaconConfig = field(default_factory=BeaconConfig)
    verifier: VerifierConfig = field(default_factory=VerifierConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)

    def validate(self) -> None:
        self.beacon.validate()
        self.verifier.validate()
        self.engine.validate()

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "FAIRDICE_") -> "DiceConfig":
        """
        Load configuration from environment variables. All variables are optional.

        Supported keys:
          - FAIRDICE_BEACON_URL=https://api.dcipher.network
          - FAIRDICE_BEACON_LATEST_PATH=/v1/randomness/latest
          - FAIRDICE_BEACON_VERIFY_PATH=/v1/verify/{round}
          - FAIRDICE_BEACON_TIMEOUT_S=5
          - FAIRDICE_BEACON_API_KEY=...          (sent as Authorization: Bearer ...)

          - FAIRDICE_MIN_SIGNATURE_LEN=10
          - FAIRDICE_MIN_RANDOMNESS_HEX=32
          - FAIRDICE_MIN_DISTINCT_CHARS=8
          - FAIRDICE_MIN_DISTINCT_BYTE_RATIO=0.5

          - FAIRDICE_SIDES=6
          - FAIRDICE_HISTORY_CAPACITY=8
          - FAIRDICE_STRICT_SAMPLING=false
          - FAIRDICE_MAX_REFETCH=3
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                if cast is bool:
                    return raw.lower() in {"1", "true", "yes", "on"}
                return cast(raw)
            except Exception as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        headers: Dict[str, str] = {}
        api_key = _get("BEACON_API_KEY", str, None)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        cfg = DiceConfig(
            beacon=BeaconConfig(
                base_url=_get("BEACON_URL", str, DEFAULT_BEACON_URL),
                latest_path=_get("BEACON_LATEST_PATH", str, LATEST_ROUND_PATH),
                verify_path=_get("BEACON_VERIFY_PATH", str, VERIFY_ROUND_PATH),
                timeout_s=_get("BEACON_TIMEOUT_S", float, DEFAULT_TIMEOUT_S),
                headers=headers,
            ),
            verifier=VerifierConfig(
                min_signature_len=_get("MIN_SIGNATURE_LEN", int, MIN_SIGNATURE_LEN),
                min_randomness_hex=_get("MIN_RANDOMNESS_HEX", int, MIN_RANDOMNESS_HEX_LEN),
                min_distinct_chars=_get("MIN_DISTINCT_CHARS", int, MIN_DISTINCT_HEX_CHARS),
                min_distinct_byte_ratio=_get(
                    "MIN_DISTINCT_BYTE_RATIO", float, MIN_DISTINCT_BYTE_RATIO
                ),
            ),
            engine=EngineConfig(
                sides=_get("SIDES", int, DEFAULT_SIDES),
                history_capacity=_get("HISTORY_CAPACITY", int, HISTORY_CAPACITY),
                strict_sampling=_get("STRICT_SAMPLING", bool, False),
                max_refetch=_get("MAX_REFETCH", int, DEFAULT_MAX_REFETCH),
            ),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "DiceConfig":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass
        structure. Example (YAML):

            beacon:
              base_url: https://api.dcipher.network
              timeout_s: 3
            verifier:
              min_signature_len: 10
            engine:
              sides: 6
              strict_sampling: true
        """
        text = _read_text(path)
        data = _parse_json_or_yaml(text, path)
        if not isinstance(data, dict):
            raise ValueError(f"{path!r} must contain a mapping at the top level")

        def _section(name: str) -> Dict[str, Any]:
            d = data.get(name) or {}
            if not isinstance(d, dict):
                raise ValueError(f"section {name!r} must be a mapping")
            return d

        try:
            cfg = DiceConfig(
                beacon=BeaconConfig(**_section("beacon")),
                verifier=VerifierConfig(**_section("verifier")),
                engine=EngineConfig(**_section("engine")),
            )
        except TypeError as e:
            raise ValueError(f"Unknown configuration key in {path!r}: {e}") from e
        cfg.validate()
        return cfg


# -------------------------
# Utilities
# -------------------------


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_json_or_yaml(text: str, path_hint: str) -> Any:
    # First try JSON
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    import yaml

    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(
            f"Failed to parse {path_hint!r} as JSON or YAML. Original error: {e}"
        ) from e


def load_config(path: Optional[str] = None, prefix: str = "FAIRDICE_") -> DiceConfig:
    """File config when *path* is given, environment config otherwise."""
    if path:
        return DiceConfig.from_file(path)
    return DiceConfig.from_env(prefix)


__all__ = [
    "BeaconConfig",
    "VerifierConfig",
    "EngineConfig",
    "DiceConfig",
    "load_config",
]
