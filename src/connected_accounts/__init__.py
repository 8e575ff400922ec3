"""connected_accounts: prove ownership of an Ethereum keypair to link two accounts."""

from connected_accounts.errors import (
    CyclicType,
    InvalidSignature,
    MissingField,
    RecoveryFailure,
    TypeMismatch,
    UnknownMethod,
    UnknownType,
    VerificationError,
)
from connected_accounts.linking_struct import Domain
from connected_accounts.service import Verifier

__version__ = "0.1.0"

__all__ = [
    "CyclicType",
    "Domain",
    "InvalidSignature",
    "MissingField",
    "RecoveryFailure",
    "TypeMismatch",
    "UnknownMethod",
    "UnknownType",
    "VerificationError",
    "Verifier",
    "__version__",
]
