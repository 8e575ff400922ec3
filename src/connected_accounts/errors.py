"""Error taxonomy for the verification engine.

Every error aborts the current operation. ``kind`` is the stable name a
caller (or the wire facade) reports back.
"""

from __future__ import annotations


class VerificationError(Exception):
    kind = "VerificationError"


# ---------- type graph (configuration time) ----------

class UnknownType(VerificationError):
    kind = "UnknownType"


class CyclicType(VerificationError):
    kind = "CyclicType"


# ---------- malformed call input ----------

class MissingField(VerificationError):
    kind = "MissingField"


class TypeMismatch(VerificationError):
    kind = "TypeMismatch"


class UnknownMethod(VerificationError):
    kind = "UnknownMethod"


# ---------- cryptographic rejection ----------

class InvalidSignature(VerificationError):
    kind = "InvalidSignature"


class RecoveryFailure(VerificationError):
    kind = "RecoveryFailure"
