import json

import httpx
import pytest
import respx
from typer.testing import CliRunner

from fairdice.cli import app
from fairdice.tests.helpers import BEACON_URL, GOOD_RANDOMNESS, SIGNATURE, THRESHOLD_PROOF, beacon_payload
from fairdice.utils.bytes import shannon_entropy

runner = CliRunner()

LATEST = "/v1/randomness/latest"


@pytest.mark.parametrize("args, face", [(["draw", "fc00"], "1"), (["draw", "0x05"], "6"), (["draw", "--sides", "20", "f015"], "2")])
def test_draw(args, face):
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == face


def test_draw_malformed_exits_2():
    result = runner.invoke(app, ["draw", "zz11"])
    assert result.exit_code == 2


def test_draw_strict_without_usable_byte_exits_1():
    result = runner.invoke(app, ["draw", "--strict", "ffff"])
    assert result.exit_code == 1


def test_roll_json():
    payloads = [httpx.Response(200, json=beacon_payload(r)) for r in (11, 12)]
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(side_effect=payloads)
        result = runner.invoke(app, ["--beacon", BEACON_URL, "roll", "--json", "--count", "2"])

    assert result.exit_code == 0, result.output
    out = json.loads(result.stdout)
    assert [r["round"] for r in out["rolls"]] == [11, 12]
    assert [r["round"] for r in out["history"]] == [12, 11]
    assert out["rolls"][0]["dice"] == 1
    assert "verification" not in out


def test_roll_and_verify_text():
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(return_value=httpx.Response(200, json=beacon_payload(21)))
        router.post("/v1/verify/21").mock(return_value=httpx.Response(200, json={"valid": True}))
        result = runner.invoke(app, ["--beacon", BEACON_URL, "roll", "--verify"])

    assert result.exit_code == 0, result.output
    assert "Rolled 1" in result.stdout
    assert "History (most recent first):" in result.stdout
    assert "Randomness verified!" in result.stdout
    assert "checked locally" not in result.stdout


def test_verify_offline_demo_round():
    result = runner.invoke(
        app,
        [
            "verify", "--offline", "--round", "5",
            "--signature", "demo_signature_0a1b2c3d",
            "--proof", "demo_threshold_proof_4e5f",
            "--randomness", GOOD_RANDOMNESS,
        ],
    )
    assert result.exit_code == 0, result.output
    assert "Randomness verified!" in result.stdout
    assert "checked locally" in result.stdout


def test_verify_short_signature_exits_1():
    result = runner.invoke(
        app,
        ["verify", "--offline", "-r", "5", "-s", "short", "-p", THRESHOLD_PROOF, "-x", GOOD_RANDOMNESS, "--json"],
    )
    assert result.exit_code == 1
    assert json.loads(result.stdout)["reason"] == "invalid signature format"


def test_verify_against_beacon():
    with respx.mock(base_url=BEACON_URL) as router:
        route = router.post("/v1/verify/5").mock(return_value=httpx.Response(200, json={"valid": False}))
        result = runner.invoke(
            app,
            ["--beacon", BEACON_URL, "verify", "-r", "5", "-s", SIGNATURE, "-p", THRESHOLD_PROOF, "-x", GOOD_RANDOMNESS],
        )
    assert route.called
    assert result.exit_code == 1
    assert "beacon rejected signature" in result.stdout


def test_latest_falls_back_to_demo():
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(side_effect=httpx.ConnectError)
        result = runner.invoke(app, ["--beacon", BEACON_URL, "latest", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["source"] == "demo"
    assert data["signature"].startswith("demo_signature_")
    assert 0.0 < data["entropy_bits"] <= 4.0


def test_config_prints_effective_json():
    result = runner.invoke(app, ["--beacon", BEACON_URL, "--timeout", "2", "config"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["beacon"]["base_url"] == BEACON_URL
    assert data["beacon"]["timeout_s"] == 2.0
    assert data["engine"]["sides"] == 6


def test_invalid_configuration_exits_2():
    result = runner.invoke(app, ["--beacon", "ftp://nowhere", "config"])
    assert result.exit_code == 2


def test_latest_reports_entropy_of_beacon_round():
    with respx.mock(base_url=BEACON_URL) as router:
        router.get(LATEST).mock(return_value=httpx.Response(200, json=beacon_payload(8)))
        result = runner.invoke(app, ["--beacon", BEACON_URL, "latest"])
    assert result.exit_code == 0, result.output
    assert f"entropy_bits: {round(shannon_entropy(GOOD_RANDOMNESS), 3)}" in result.stdout
    assert "source: beacon" in result.stdout
