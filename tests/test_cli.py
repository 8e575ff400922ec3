"""Tests for the connected-accounts CLI."""

from __future__ import annotations

import importlib
import json

import pytest
from click.testing import CliRunner

from connected_accounts import __version__
from connected_accounts.cli import cli
from vectors import (
    ACCOUNT,
    DOMAIN_SEPARATOR,
    LINKING_ACCOUNTS_HASH,
    PERSONAL_DIGEST,
    PERSONAL_MESSAGE,
    PERSONAL_SIGNATURE,
    PERSONAL_SIGNER,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("NAME", "VERSION", "CHAIN_ID", "VERIFYING_CONTRACT"):
        monkeypatch.delenv(f"CONNECTED_ACCOUNTS_{key}", raising=False)


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_view_domain_separator(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["view", "domain_separator"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"hash": DOMAIN_SEPARATOR}


def test_view_domain_flags(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--chain-id", "1", "view", "domain_separator"])
    assert result.exit_code == 0
    assert json.loads(result.output)["hash"] != DOMAIN_SEPARATOR


def test_view_hash_linking_accounts(cli_runner: CliRunner) -> None:
    args = {"linking_accounts": {"account_a": ACCOUNT, "account_b": ACCOUNT}}
    result = cli_runner.invoke(cli, ["view", "hash_linking_accounts", json.dumps(args)])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"hash": LINKING_ACCOUNTS_HASH}


def test_view_eth_ecrecover(cli_runner: CliRunner) -> None:
    args = {"data": {"m": PERSONAL_DIGEST, "sig": PERSONAL_SIGNATURE[:128], "v": 0, "mc": False}}
    result = cli_runner.invoke(cli, ["view", "eth_ecrecover", json.dumps(args)])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"address": PERSONAL_SIGNER}


def test_view_error_reports_kind(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["view", "hash_linking_account", '{"origin_id": "x"}'])
    assert result.exit_code == 1
    assert json.loads(result.output)["error"] == "MissingField"


def test_view_rejects_bad_json(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["view", "hash_linking_account", "{nope"])
    assert result.exit_code == 2


def test_bad_domain_flag(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--verifying-contract", "0x12", "view", "domain_separator"])
    assert result.exit_code == 2


def test_chain_id_too_large(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--chain-id", str(2**256), "view", "domain_separator"])
    assert result.exit_code == 2
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_hash_message(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["hash-message", PERSONAL_MESSAGE])
    assert result.exit_code == 0
    assert result.output.strip() == PERSONAL_DIGEST


def test_split_signature(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["split-signature", "0x" + PERSONAL_SIGNATURE])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"sig": PERSONAL_SIGNATURE[:128], "v": 0}


def test_split_signature_wrong_length(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["split-signature", PERSONAL_SIGNATURE[:128]])
    assert result.exit_code == 1
    assert json.loads(result.output)["error"] == "TypeMismatch"


def test_main_module_import_does_not_run_cli() -> None:
    module = importlib.import_module("connected_accounts.__main__")
    assert module.cli is cli
