from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from fairdice.config import BeaconConfig, DiceConfig, EngineConfig, VerifierConfig
from fairdice.metrics import Metrics
from fairdice.tests.helpers import BEACON_URL


@pytest.fixture
def metrics() -> Metrics:
    return Metrics(registry=CollectorRegistry())


@pytest.fixture
def beacon_config() -> BeaconConfig:
    return BeaconConfig(base_url=BEACON_URL, timeout_s=1.0)


@pytest.fixture
def dice_config(beacon_config: BeaconConfig) -> DiceConfig:
    return DiceConfig(beacon=beacon_config, verifier=VerifierConfig(), engine=EngineConfig())
