"""Read-only verification operations.

:class:`Verifier` is bound to one immutable :class:`Domain` and caches its
separator at construction. Every operation is a pure function of its
arguments and that domain; nothing is mutated after ``__init__``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ValidationError

from connected_accounts.errors import MissingField, TypeMismatch, UnknownMethod
from connected_accounts.linking_struct import (
    LINKING_TYPES,
    Domain,
    domain_separator,
    linking_account_hash,
    linking_accounts_hash,
)
from connected_accounts.models import (
    AddressOutput,
    EcrecoverArgs,
    HashOutput,
    LinkingAccount,
    LinkingAccountsArgs,
    VerifyEip712Args,
)
from connected_accounts.sign_core import eip712_digest, recover

logger = structlog.get_logger(__name__)


class Verifier:
    def __init__(self, domain: Domain) -> None:
        self._domain = domain
        self._separator = domain_separator(domain, LINKING_TYPES)
        logger.debug(
            "verifier_ready",
            name=domain.name,
            version=domain.version,
            chain_id=domain.chain_id,
            verifying_contract=domain.verifying_contract.hex(),
            domain_separator=self._separator.hex(),
        )

    @property
    def domain(self) -> Domain:
        return self._domain

    # ---------- byte-level operations ----------

    def domain_separator(self) -> bytes:
        return self._separator

    def hash_linking_account(self, account: Mapping[str, Any]) -> bytes:
        return linking_account_hash(account)

    def hash_linking_accounts_no_domain(
        self, account_a: Mapping[str, Any], account_b: Mapping[str, Any]
    ) -> bytes:
        return linking_accounts_hash(account_a, account_b)

    def hash_linking_accounts(
        self, account_a: Mapping[str, Any], account_b: Mapping[str, Any]
    ) -> bytes:
        return eip712_digest(
            self._separator, self.hash_linking_accounts_no_domain(account_a, account_b)
        )

    def eth_ecrecover(self, m: bytes, sig: bytes, v: int, mc: bool) -> bytes:
        return recover(m, sig, v, mc)

    def eth_verify_eip712(
        self,
        account_a: Mapping[str, Any],
        account_b: Mapping[str, Any],
        sig: bytes,
        v: int,
        mc: bool,
    ) -> bytes:
        return recover(self.hash_linking_accounts(account_a, account_b), sig, v, mc)

    # ---------- JSON-shaped facade ----------

    def view(self, method: str, args: Mapping[str, Any] | None = None) -> dict[str, str]:
        """Run one read-only operation on JSON-shaped ``args``.

        Returns ``{"hash": hex32}`` or ``{"address": hex20}``.
        """
        handler = self._views().get(method)
        if handler is None:
            raise UnknownMethod(f"no such method: {method!r}")
        return handler(args or {}).model_dump()

    def _views(self) -> dict[str, Callable[[Mapping[str, Any]], BaseModel]]:
        return {
            "domain_separator": self._view_domain_separator,
            "hash_linking_account": self._view_hash_linking_account,
            "hash_linking_accounts_no_domain": self._view_hash_linking_accounts_no_domain,
            "hash_linking_accounts": self._view_hash_linking_accounts,
            "eth_ecrecover": self._view_eth_ecrecover,
            "eth_verify_eip712": self._view_eth_verify_eip712,
        }

    def _view_domain_separator(self, args: Mapping[str, Any]) -> HashOutput:
        return HashOutput(hash=self.domain_separator().hex())

    def _view_hash_linking_account(self, args: Mapping[str, Any]) -> HashOutput:
        account = _parse(LinkingAccount, args)
        return HashOutput(hash=self.hash_linking_account(account.model_dump()).hex())

    def _view_hash_linking_accounts_no_domain(self, args: Mapping[str, Any]) -> HashOutput:
        pair = _parse(LinkingAccountsArgs, args).linking_accounts
        digest = self.hash_linking_accounts_no_domain(
            pair.account_a.model_dump(), pair.account_b.model_dump()
        )
        return HashOutput(hash=digest.hex())

    def _view_hash_linking_accounts(self, args: Mapping[str, Any]) -> HashOutput:
        pair = _parse(LinkingAccountsArgs, args).linking_accounts
        digest = self.hash_linking_accounts(
            pair.account_a.model_dump(), pair.account_b.model_dump()
        )
        return HashOutput(hash=digest.hex())

    def _view_eth_ecrecover(self, args: Mapping[str, Any]) -> AddressOutput:
        data = _parse(EcrecoverArgs, args).data
        address = self.eth_ecrecover(
            bytes.fromhex(data.m), bytes.fromhex(data.sig), data.v, data.mc
        )
        return AddressOutput(address=address.hex())

    def _view_eth_verify_eip712(self, args: Mapping[str, Any]) -> AddressOutput:
        parsed = _parse(VerifyEip712Args, args)
        pair, signature = parsed.linking_accounts, parsed.signature
        address = self.eth_verify_eip712(
            pair.account_a.model_dump(),
            pair.account_b.model_dump(),
            bytes.fromhex(signature.sig),
            signature.v,
            signature.mc,
        )
        return AddressOutput(address=address.hex())


def _parse(model: type[Any], args: Mapping[str, Any]) -> Any:
    try:
        return model.model_validate(args)
    except ValidationError as exc:
        errors = exc.errors()
        missing = [e for e in errors if e["type"] == "missing"]
        if missing:
            loc = ".".join(str(p) for p in missing[0]["loc"])
            raise MissingField(f"{loc} is missing") from exc
        first = errors[0]
        loc = ".".join(str(p) for p in first["loc"])
        raise TypeMismatch(f"{loc}: {first['msg']}") from exc
