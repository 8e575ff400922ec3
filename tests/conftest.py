"""Shared pytest fixtures for connected_accounts tests."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from connected_accounts.linking_struct import Domain
from connected_accounts.service import Verifier
from vectors import ZERO_ADDRESS


@pytest.fixture
def domain() -> Domain:
    return Domain(
        name="Connected Accounts",
        version="1",
        chain_id=5,
        verifying_contract=ZERO_ADDRESS,
    )


@pytest.fixture
def verifier(domain: Domain) -> Verifier:
    return Verifier(domain)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()
