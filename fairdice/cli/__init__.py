"""
fairdice.cli
------------

Command line front-end for the dice engine.

Commands:
  - roll     : Roll one or more dice from the beacon (optionally verify the last roll).
  - verify   : Run the verification protocol on explicit round data.
  - draw     : Convert a hex string to a die face offline.
  - latest   : Print the round the randomness source produces right now.
  - config   : Print the effective configuration.

Environment:
  FAIRDICE_* variables (see fairdice.config.DiceConfig.from_env) configure the
  beacon endpoint, thresholds and engine behavior.

Example:
  fairdice roll --count 3 --verify
  fairdice verify --round 42 --signature ab12... --proof cd34... --randomness 9f...
  python -m fairdice.cli draw fc0a1b
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence

import typer

from fairdice.beacon.client import BeaconClient
from fairdice.beacon.source import RandomnessSource
from fairdice.config import DiceConfig, load_config
from fairdice.converter import to_die_face
from fairdice.engine import RollEngine
from fairdice.errors import DiceError, MalformedInputError
from fairdice.types.core import RollRecord, VerificationVerdict
from fairdice.utils.bytes import shannon_entropy, strip_0x
from fairdice.utils.fmt import format_hash, format_timestamp, relative_time
from fairdice.verify.verifier import ProofVerifier, verdict_message

__all__ = ["app", "main"]

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="fairdice",
    help="Verifiable dice rolls from a threshold randomness beacon.",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass
class _State:
    config: DiceConfig


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _echo_json(obj: object) -> None:
    typer.echo(json.dumps(obj, indent=2))


def _render_record(rec: RollRecord) -> str:
    return (
        f"{rec.dice}  round {rec.round}  {format_timestamp(rec.timestamp)} "
        f"({relative_time(rec.timestamp)})  committee: {rec.committee_id or 'N/A'}  "
        f"randomness: {format_hash(rec.randomness)}  [{rec.source.value}]"
    )


def _render_verdict(verdict: VerificationVerdict) -> str:
    return verdict_message(verdict)


@app.callback()
def _main(
    ctx: typer.Context,
    config_file: Optional[str] = typer.Option(None, "--config", "-c", help="JSON/YAML config file."),
    beacon: Optional[str] = typer.Option(None, "--beacon", help="Beacon base URL (overrides config)."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Beacon call timeout in seconds."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    _configure_logging(log_level)
    try:
        cfg = load_config(config_file)
        if beacon is not None:
            cfg.beacon.base_url = beacon
        if timeout is not None:
            cfg.beacon.timeout_s = timeout
        cfg.validate()
    except (OSError, ValueError) as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(2)
    logger.debug("effective config: %s", cfg.to_dict())
    ctx.obj = _State(config=cfg)


@app.command("roll")
def cmd_roll(
    ctx: typer.Context,
    count: int = typer.Option(1, "--count", "-n", min=1, max=100, help="Number of rolls."),
    verify: bool = typer.Option(False, "--verify", help="Verify the last roll afterwards."),
    sides: Optional[int] = typer.Option(None, "--sides", min=1, max=256, help="Die sides (default from config)."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text."),
) -> None:
    """Roll dice from the beacon and print the rolls and history."""
    cfg: DiceConfig = ctx.obj.config
    if sides is not None:
        cfg.engine.sides = sides

    async def _run() -> tuple[List[RollRecord], List[RollRecord], Optional[VerificationVerdict]]:
        async with RollEngine.from_config(cfg) as engine:
            rolls = [await engine.roll() for _ in range(count)]
            verdict = await engine.verify_current() if verify else None
            return rolls, engine.history, verdict

    try:
        rolls, history, verdict = asyncio.run(_run())
    except DiceError as e:
        typer.echo(f"Failed to roll dice: {e}. Please try again.", err=True)
        raise typer.Exit(1)

    if as_json:
        out = {
            "rolls": [r.to_dict() for r in rolls],
            "history": [r.to_dict() for r in history],
        }
        if verdict is not None:
            out["verification"] = verdict.to_dict()
        _echo_json(out)
        return

    for rec in rolls:
        typer.echo(f"Rolled {rec.dice}")
    typer.echo("History (most recent first):")
    for rec in history:
        typer.echo("  " + _render_record(rec))
    if verdict is not None:
        typer.echo(_render_verdict(verdict))


@app.command("verify")
def cmd_verify(
    ctx: typer.Context,
    round_id: int = typer.Option(..., "--round", "-r", help="Round number."),
    signature: str = typer.Option(..., "--signature", "-s", help="Round signature."),
    proof: str = typer.Option("", "--proof", "-p", help="Threshold proof."),
    randomness: str = typer.Option(..., "--randomness", "-x", help="Hex randomness."),
    offline: bool = typer.Option(False, "--offline", help="Skip the beacon; verify locally."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text."),
) -> None:
    """
    Verify round data. Exits with status 1 when the verdict is negative.
    """
    cfg: DiceConfig = ctx.obj.config

    async def _run() -> VerificationVerdict:
        if offline:
            return await ProofVerifier(None, cfg.verifier).verify(round_id, signature, proof, randomness)
        async with BeaconClient(cfg.beacon) as client:
            return await ProofVerifier(client, cfg.verifier).verify(round_id, signature, proof, randomness)

    verdict = asyncio.run(_run())
    if as_json:
        _echo_json(verdict.to_dict())
    else:
        typer.echo(_render_verdict(verdict))
    if not verdict.valid:
        raise typer.Exit(1)


@app.command("draw")
def cmd_draw(
    ctx: typer.Context,
    random_hex: str = typer.Argument(..., help="Hex-encoded randomness."),
    sides: Optional[int] = typer.Option(None, "--sides", min=1, max=256, help="Die sides (default from config)."),
    strict: bool = typer.Option(False, "--strict", help="Fail instead of using the biased fallback."),
) -> None:
    """Convert hex randomness to a die face without touching the network."""
    cfg: DiceConfig = ctx.obj.config
    try:
        face = to_die_face(random_hex, sides or cfg.engine.sides, strict=strict)
    except MalformedInputError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(2)
    except DiceError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    typer.echo(str(face))


@app.command("latest")
def cmd_latest(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of text."),
) -> None:
    """
    Print the round the randomness source produces (beacon, or demo fallback),
    with the Shannon entropy of its hex digits in bits per symbol.
    """
    cfg: DiceConfig = ctx.obj.config

    async def _run():
        async with BeaconClient(cfg.beacon) as client:
            return await RandomnessSource(client).latest()

    try:
        rnd = asyncio.run(_run())
    except DiceError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    data = {
        "round": int(rnd.round),
        "randomness": rnd.randomness,
        "signature": rnd.signature,
        "threshold_proof": rnd.threshold_proof,
        "committee_id": rnd.committee_id,
        "unix_time": rnd.unix_time,
        "source": rnd.source.value,
        "entropy_bits": round(shannon_entropy(strip_0x(rnd.randomness)), 3),
    }
    if as_json:
        _echo_json(data)
        return
    for k, v in data.items():
        typer.echo(f"{k}: {v}")


@app.command("config")
def cmd_config(ctx: typer.Context) -> None:
    """Print the effective configuration as JSON."""
    typer.echo(ctx.obj.config.to_json())


def main(argv: Optional[Sequence[str]] = None) -> None:  # pragma: no cover - thin wrapper
    """Entry-point for the ``fairdice`` console script and ``python -m fairdice.cli``."""
    try:
        app(args=list(argv) if argv is not None else None, prog_name="fairdice")
    except KeyboardInterrupt:
        typer.echo("", err=True)
        sys.exit(130)


if __name__ == "__main__":  # pragma: no cover
    main()
