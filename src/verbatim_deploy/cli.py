"""Verbatim command line: encode, inspect and simulate launchers."""
from __future__ import annotations

import hashlib
import json
import logging
import re
from pathlib import Path

import click

from verbatim_core.errors import ERRORS, VerbatimError
from verbatim_core.launcher import encode, inspect_launcher
from verbatim_deploy.deployer import Deployer
from verbatim_deploy.ledger import SimulatedLedger

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}


def read_input(path: Path, binary: bool) -> bytes:
    """Read raw bytes, or hex text with an optional 0x prefix and any whitespace."""
    if binary:
        return path.read_bytes()
    text = re.sub(r"\s+", "", path.read_text(encoding="utf-8"))
    if text[:2].lower() == "0x":
        text = text[2:]
    if len(text) % 2 != 0:
        raise ValueError(f"Odd-length hex input: {path}")
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise ValueError(f"Invalid hex input: {path}") from None


def _echo_report(report: dict) -> None:
    click.echo(json.dumps(report, **CANONICAL_JSON_KW))


def _fatal(e: Exception) -> None:
    # Fail closed with a single-line reason; no stack traces.
    click.echo(f"FATAL: {e}", err=True)
    raise SystemExit(1)


@click.group()
@click.option("--verbose", is_flag=True, help="Log deployment steps to stderr")
def main(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command("encode")
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--binary", is_flag=True, help="Read the payload as raw bytes instead of hex")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), help="Write launcher hex here")
def encode_cmd(payload: Path, binary: bool, out: Path | None) -> None:
    """Print the launcher for PAYLOAD as hex."""
    try:
        launcher = encode(read_input(payload, binary))
    except (ValueError, VerbatimError) as e:
        _fatal(e)
    if out is None:
        click.echo(launcher.hex())
    else:
        out.write_text(launcher.hex() + "\n", encoding="utf-8")


@main.command("inspect")
@click.argument("launcher", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--binary", is_flag=True, help="Read the launcher as raw bytes instead of hex")
def inspect_cmd(launcher: Path, binary: bool) -> None:
    """Check that LAUNCHER is a well-formed launcher."""
    try:
        program = read_input(launcher, binary)
    except ValueError as e:
        _fatal(e)
    try:
        header = inspect_launcher(program)
    except ValueError as e:
        errors = [{"code": "E_LAUNCHER_MALFORMED", "message": ERRORS["E_LAUNCHER_MALFORMED"], "detail": str(e)}]
        _echo_report({"status": "FAIL", "error_count": len(errors), "errors": errors})
        raise SystemExit(1)

    payload = program[header.payload_offset:]
    _echo_report({
        "status": "PASS",
        "error_count": 0,
        "errors": [],
        "payload_length": header.payload_length,
        "payload_offset": header.payload_offset,
        "payload_sha256": hashlib.sha256(payload).hexdigest(),
    })


@main.command("simulate")
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--binary", is_flag=True, help="Read the payload as raw bytes instead of hex")
@click.option("--value", type=click.IntRange(min=0), default=0, show_default=True, help="Value attached to the construction")
@click.option("--balance", type=click.IntRange(min=0), default=0, show_default=True, help="Starting balance of the simulated creator")
def simulate_cmd(payload: Path, binary: bool, value: int, balance: int) -> None:
    """Deploy PAYLOAD against a fresh simulated ledger."""
    try:
        data = read_input(payload, binary)
    except ValueError as e:
        _fatal(e)

    ledger = SimulatedLedger(balance=balance)
    try:
        address = Deployer(ledger).deploy(data, value)
    except VerbatimError as e:
        errors = [e.to_dict()]
        _echo_report({"status": "FAIL", "error_count": len(errors), "errors": errors})
        raise SystemExit(1)

    code = ledger.code_at(address)
    _echo_report({
        "status": "PASS",
        "error_count": 0,
        "errors": [],
        "address": "0x" + address.hex(),
        "code_length": len(code),
        "code_sha256": hashlib.sha256(code).hexdigest(),
        "code_matches_payload": code == data,
    })


if __name__ == "__main__":
    main()
