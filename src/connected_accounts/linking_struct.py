from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from connected_accounts.errors import TypeMismatch
from connected_accounts.typed_data import TypeSet

# EIP-712 type strings reproduced by LINKING_TYPES:
# LinkingAccount(string origin_id,string account_id)
# LinkingAccounts(LinkingAccount account_a,LinkingAccount account_b)LinkingAccount(string origin_id,string account_id)
# EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)
LINKING_TYPES = TypeSet({
    "EIP712Domain": [
        ("name", "string"),
        ("version", "string"),
        ("chainId", "uint256"),
        ("verifyingContract", "address"),
    ],
    "LinkingAccount": [
        ("origin_id", "string"),
        ("account_id", "string"),
    ],
    "LinkingAccounts": [
        ("account_a", "LinkingAccount"),
        ("account_b", "LinkingAccount"),
    ],
})

DOMAIN_TYPEHASH = LINKING_TYPES.type_hash("EIP712Domain")
LINKING_ACCOUNT_TYPEHASH = LINKING_TYPES.type_hash("LinkingAccount")
LINKING_ACCOUNTS_TYPEHASH = LINKING_TYPES.type_hash("LinkingAccounts")


@dataclass(frozen=True)
class Domain:
    """EIP-712 domain the engine is bound to. Fixed for the engine's lifetime."""

    name: str
    version: str
    chain_id: int
    verifying_contract: bytes  # 20 bytes

    def __post_init__(self) -> None:
        if isinstance(self.chain_id, bool) or not isinstance(self.chain_id, int):
            raise TypeMismatch("chain_id must be an integer")
        if not 0 <= self.chain_id < (1 << 256):
            raise TypeMismatch("chain_id must be an integer in uint256 range")
        if not isinstance(self.verifying_contract, bytes) or len(self.verifying_contract) != 20:
            raise TypeMismatch("verifying_contract must be 20 bytes")

    def as_struct(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "chainId": self.chain_id,
            "verifyingContract": self.verifying_contract,
        }


def domain_separator(domain: Domain, types: TypeSet = LINKING_TYPES) -> bytes:
    """
    Computes the EIP-712 Domain Separator.
    """
    return types.hash_struct("EIP712Domain", domain.as_struct())


def linking_account_hash(account: Mapping[str, Any]) -> bytes:
    return LINKING_TYPES.hash_struct("LinkingAccount", account)


def linking_accounts_hash(account_a: Mapping[str, Any], account_b: Mapping[str, Any]) -> bytes:
    """
    structHash of LinkingAccounts. Order matters: account_a is encoded first,
    so swapping the two accounts yields a different hash.
    """
    return LINKING_TYPES.hash_struct(
        "LinkingAccounts",
        {"account_a": account_a, "account_b": account_b},
    )
