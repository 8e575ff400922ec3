"""Pydantic models for the read-only call shapes.

Hash and address fields travel as lowercase-or-mixed hex without a ``0x``
prefix; results are always emitted lowercase.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, StrictBool, StrictInt, StrictStr, StringConstraints

Hex20 = Annotated[str, StringConstraints(strict=True, pattern=r"^[0-9a-fA-F]{40}$")]
Hex32 = Annotated[str, StringConstraints(strict=True, pattern=r"^[0-9a-fA-F]{64}$")]
Hex64 = Annotated[str, StringConstraints(strict=True, pattern=r"^[0-9a-fA-F]{128}$")]


class _Frozen(BaseModel):
    model_config = {"frozen": True}


# --- arguments ---


class LinkingAccount(_Frozen):
    origin_id: StrictStr
    account_id: StrictStr


class LinkingAccounts(_Frozen):
    account_a: LinkingAccount
    account_b: LinkingAccount


class LinkingAccountsArgs(_Frozen):
    linking_accounts: LinkingAccounts


class EcrecoverInput(_Frozen):
    m: Hex32
    sig: Hex64
    v: StrictInt
    mc: StrictBool


class EcrecoverArgs(_Frozen):
    data: EcrecoverInput


class SignatureInput(_Frozen):
    sig: Hex64
    v: StrictInt
    mc: StrictBool


class VerifyEip712Args(_Frozen):
    linking_accounts: LinkingAccounts
    signature: SignatureInput


# --- results ---


class HashOutput(_Frozen):
    hash: Hex32


class AddressOutput(_Frozen):
    address: Hex20
