"""Domain configuration: CLI flags, env vars, and code defaults in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``CONNECTED_ACCOUNTS_*`` prefix
  3. Code defaults
"""

from __future__ import annotations

from eth_utils import is_hex_address, to_canonical_address
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from connected_accounts.linking_struct import Domain

UINT256_LIMIT = 1 << 256
ZERO_ADDRESS = "0x" + "00" * 20


class DomainSettings(BaseSettings):
    """EIP-712 domain the verifier is bound to; frozen after construction."""

    model_config = SettingsConfigDict(env_prefix="CONNECTED_ACCOUNTS_", frozen=True)

    name: str = "Connected Accounts"
    version: str = "1"
    chain_id: int = Field(default=5, ge=0, lt=UINT256_LIMIT)
    verifying_contract: str = ZERO_ADDRESS

    @field_validator("verifying_contract")
    @classmethod
    def _check_address(cls, value: str) -> str:
        if not is_hex_address(value):
            msg = f"not a 20-byte hex address: {value!r}"
            raise ValueError(msg)
        return value

    @classmethod
    def from_cli(cls, **overrides: object) -> DomainSettings:
        """Build settings, ignoring CLI flags that were not given."""
        return cls(**{k: v for k, v in overrides.items() if v is not None})

    def to_domain(self) -> Domain:
        return Domain(
            name=self.name,
            version=self.version,
            chain_id=self.chain_id,
            verifying_contract=to_canonical_address(self.verifying_contract),
        )
