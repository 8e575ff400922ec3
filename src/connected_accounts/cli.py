"""Root CLI group for connected-accounts."""

from __future__ import annotations

import json

import click
from eth_utils import decode_hex
from pydantic import ValidationError

from connected_accounts import __version__
from connected_accounts.errors import VerificationError
from connected_accounts.log import configure_logging
from connected_accounts.service import Verifier
from connected_accounts.settings import DomainSettings
from connected_accounts.sign_core import personal_sign_hash, split_signature


def _emit(payload: dict) -> None:
    click.echo(json.dumps(payload, separators=(",", ":")))


@click.group()
@click.version_option(version=__version__, prog_name="connected-accounts")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--name", default=None, help="EIP-712 domain name.")
@click.option("--domain-version", default=None, help="EIP-712 domain version.")
@click.option("--chain-id", type=int, default=None, help="EIP-712 domain chain id.")
@click.option("--verifying-contract", default=None, help="EIP-712 verifying contract address.")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    log_json: bool,
    name: str | None,
    domain_version: str | None,
    chain_id: int | None,
    verifying_contract: str | None,
) -> None:
    """Verify Ethereum signatures that link two accounts."""
    configure_logging(verbose=verbose, log_json=log_json)
    try:
        settings = DomainSettings.from_cli(
            name=name,
            version=domain_version,
            chain_id=chain_id,
            verifying_contract=verifying_contract,
        )
    except ValidationError as exc:
        raise click.BadParameter(str(exc)) from exc
    ctx.obj = settings


@cli.command()
@click.argument("method")
@click.argument("args_json", required=False, default="{}")
@click.pass_obj
def view(settings: DomainSettings, method: str, args_json: str) -> None:
    """Run a read-only METHOD with ARGS_JSON and print the JSON result."""
    try:
        args = json.loads(args_json)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"ARGS_JSON is not valid JSON: {exc}") from exc

    try:
        result = Verifier(settings.to_domain()).view(method, args)
    except VerificationError as exc:
        _emit({"error": exc.kind, "message": str(exc)})
        raise SystemExit(1) from exc
    _emit(result)


@cli.command("hash-message")
@click.argument("message")
def hash_message(message: str) -> None:
    """Print the personal_sign digest of MESSAGE."""
    click.echo(personal_sign_hash(message.encode("utf-8")).hex())


@cli.command("split-signature")
@click.argument("signature")
def split_signature_cmd(signature: str) -> None:
    """Split a 65-byte wallet SIGNATURE into sig and a 0/1 recovery id."""
    try:
        sig, v = split_signature(decode_hex(signature))
    except (ValueError, VerificationError) as exc:
        kind = getattr(exc, "kind", "TypeMismatch")
        _emit({"error": kind, "message": str(exc)})
        raise SystemExit(1) from exc
    _emit({"sig": sig.hex(), "v": v})
