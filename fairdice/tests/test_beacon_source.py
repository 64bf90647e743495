import asyncio

import httpx
import pytest
import respx

from fairdice.beacon.client import BeaconClient
from fairdice.beacon.source import RandomnessSource, generate_demo_round
from fairdice.config import BeaconConfig
from fairdice.constants import DEMO_SIGNATURE_PREFIX, DEMO_THRESHOLD_PROOF_PREFIX
from fairdice.errors import MalformedInputError, NetworkError
from fairdice.tests.helpers import BEACON_URL, GOOD_RANDOMNESS, beacon_payload, sample
from fairdice.types.core import RoundSource
from fairdice.utils.bytes import is_hex

LATEST = "/v1/randomness/latest"


def _assert_demo(rnd, now):
    assert rnd.source is RoundSource.DEMO
    assert rnd.is_demo
    assert rnd.signature.startswith(DEMO_SIGNATURE_PREFIX)
    assert rnd.threshold_proof.startswith(DEMO_THRESHOLD_PROOF_PREFIX)
    assert rnd.committee_id.startswith("committee_")
    assert len(rnd.randomness) == 64 and is_hex(rnd.randomness)
    assert rnd.round == now
    assert rnd.unix_time == now


@pytest.mark.asyncio
async def test_latest_returns_beacon_round(beacon_config, metrics):
    with respx.mock(base_url=BEACON_URL) as router:
        route = router.get(LATEST).mock(return_value=httpx.Response(200, json=beacon_payload(42)))
        async with BeaconClient(beacon_config, metrics=metrics) as client:
            rnd = await RandomnessSource(client).latest()

    assert route.called
    assert rnd.source is RoundSource.BEACON
    assert rnd.round == 42
    assert rnd.randomness == GOOD_RANDOMNESS
    assert rnd.committee_id == "committee-alpha"
    assert rnd.unix_time == 1_700_000_042
    assert sample(metrics, "fairdice_core_beacon_request_seconds_count", endpoint="latest") == 1.0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.ConnectError,
        httpx.ReadTimeout,
        httpx.Response(503, text="unavailable"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"round": 5}),
        httpx.Response(200, json=[1, 2, 3]),
    ],
    ids=["connect", "read-timeout", "http-503", "not-json", "missing-fields", "not-an-object"],
)
async def test_latest_falls_back_to_demo_round(beacon_config, metrics, response):
    with respx.mock(base_url=BEACON_URL) as router:
        if isinstance(response, httpx.Response):
            router.get(LATEST).mock(return_value=response)
        else:
            router.get(LATEST).mock(side_effect=response)
        async with BeaconClient(beacon_config, metrics=metrics) as client:
            rnd = await RandomnessSource(client, clock=lambda: 1_750_000_000.7).latest()

    _assert_demo(rnd, 1_750_000_000)


@pytest.mark.asyncio
async def test_non_hex_randomness_from_beacon_is_a_format_error(beacon_config, metrics):
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(return_value=httpx.Response(200, json=beacon_payload(randomness="zz" * 32)))
        async with BeaconClient(beacon_config, metrics=metrics) as client:
            with pytest.raises(MalformedInputError):
                await RandomnessSource(client).latest()


@pytest.mark.asyncio
async def test_numeric_committee_id_is_normalized(beacon_config, metrics):
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(return_value=httpx.Response(200, json=beacon_payload(committee_id=17)))
        async with BeaconClient(beacon_config, metrics=metrics) as client:
            rnd = await RandomnessSource(client).latest()
    assert rnd.committee_id == "17"


@pytest.mark.asyncio
async def test_slow_beacon_is_bounded_by_total_timeout(metrics):
    async def _slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json=beacon_payload())

    http = httpx.AsyncClient(transport=httpx.MockTransport(_slow))
    cfg = BeaconConfig(base_url=BEACON_URL, timeout_s=0.05)
    client = BeaconClient(cfg, client=http, metrics=metrics)
    try:
        with pytest.raises(NetworkError) as ei:
            await client.fetch_latest()
        assert ei.value.reason == "timeout"

        rnd = await RandomnessSource(client).latest()
        assert rnd.is_demo
    finally:
        await client.close()
        await http.aclose()


@pytest.mark.asyncio
async def test_client_reports_http_status(beacon_config, metrics):
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(return_value=httpx.Response(502))
        async with BeaconClient(beacon_config, metrics=metrics) as client:
            with pytest.raises(NetworkError) as ei:
                await client.fetch_latest()
    assert ei.value.status == 502
    assert ei.value.reason == "http-502"
    assert ei.value.url == BEACON_URL + LATEST


def test_demo_rounds_are_fresh():
    a = generate_demo_round(1_750_000_000)
    b = generate_demo_round(1_750_000_000)
    assert a.randomness != b.randomness
    assert a.signature != b.signature
    assert a.round == b.round == 1_750_000_000


@pytest.mark.asyncio
async def test_client_opens_lazily_and_reopens_after_close(beacon_config, metrics):
    client = BeaconClient(beacon_config, metrics=metrics)
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(return_value=httpx.Response(200, json=beacon_payload(3)))
        first = await client.fetch_latest()
        await client.close()
        second = await client.fetch_latest()
        await client.close()
    assert first.round == second.round == 3
