"""Tests for DomainSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from connected_accounts.linking_struct import domain_separator
from connected_accounts.settings import DomainSettings
from vectors import DOMAIN_SEPARATOR


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("NAME", "VERSION", "CHAIN_ID", "VERIFYING_CONTRACT"):
        monkeypatch.delenv(f"CONNECTED_ACCOUNTS_{key}", raising=False)


class TestDomainSettings:
    def test_defaults(self) -> None:
        settings = DomainSettings()
        assert settings.name == "Connected Accounts"
        assert settings.version == "1"
        assert settings.chain_id == 5
        assert domain_separator(settings.to_domain()).hex() == DOMAIN_SEPARATOR

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONNECTED_ACCOUNTS_CHAIN_ID", "1")
        monkeypatch.setenv("CONNECTED_ACCOUNTS_VERIFYING_CONTRACT", "0x" + "ab" * 20)
        domain = DomainSettings().to_domain()
        assert domain.chain_id == 1
        assert domain.verifying_contract == b"\xab" * 20

    def test_cli_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONNECTED_ACCOUNTS_NAME", "From Env")
        settings = DomainSettings.from_cli(name="From Flag", version=None, chain_id=None)
        assert settings.name == "From Flag"
        assert settings.version == "1"

    def test_unprefixed_address_accepted(self) -> None:
        settings = DomainSettings(verifying_contract="cd" * 20)
        assert settings.to_domain().verifying_contract == b"\xcd" * 20

    @pytest.mark.parametrize("address", ["0x1234", "not-an-address", "0x" + "zz" * 20])
    def test_bad_address(self, address: str) -> None:
        with pytest.raises(ValidationError):
            DomainSettings(verifying_contract=address)

    def test_negative_chain_id(self) -> None:
        with pytest.raises(ValidationError):
            DomainSettings(chain_id=-1)

    def test_chain_id_upper_bound(self) -> None:
        with pytest.raises(ValidationError):
            DomainSettings(chain_id=2**256)
        domain = DomainSettings(chain_id=2**256 - 1).to_domain()
        assert domain.chain_id == 2**256 - 1

    def test_frozen(self) -> None:
        settings = DomainSettings()
        with pytest.raises(ValidationError):
            settings.chain_id = 2
