from __future__ import annotations

from coincurve import PublicKey
from eth_hash.auto import keccak as _keccak

from connected_accounts.errors import InvalidSignature, RecoveryFailure, TypeMismatch

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2

EIP191_PREFIX = b"\x19\x01"
PERSONAL_SIGN_PREFIX = b"\x19Ethereum Signed Message:\n"

# ---------- keccak ----------

def keccak(data: bytes) -> bytes:
    return _keccak(bytes(data))

# ---------- fixed-width helpers ----------

def u256(x: int) -> bytes:
    return x.to_bytes(32, "big")

def i256(x: int) -> bytes:
    # two's complement in a 256-bit word
    return (x % (1 << 256)).to_bytes(32, "big")

def addr(raw: bytes) -> bytes:
    # 20-byte address left-padded to a 32-byte word
    if len(raw) != 20:
        raise TypeMismatch(f"address must be 20 bytes, got {len(raw)}")
    return b"\x00" * 12 + raw

def b32(x: bytes) -> bytes:
    if len(x) != 32:
        raise TypeMismatch(f"expected 32 bytes, got {len(x)}")
    return bytes(x)

# ---------- message digests ----------

def eip712_digest(domain_separator: bytes, struct_hash: bytes) -> bytes:
    return keccak(EIP191_PREFIX + b32(domain_separator) + b32(struct_hash))

def personal_sign_hash(message: bytes) -> bytes:
    """keccak("\\x19Ethereum Signed Message:\\n" + len(message) + message)."""
    return keccak(PERSONAL_SIGN_PREFIX + str(len(message)).encode("ascii") + message)

# ---------- secp256k1 recovery ----------

def split_signature(sig65: bytes) -> tuple[bytes, int]:
    """Split a 65-byte r||s||v wallet signature into (r||s, recovery id).

    Wallets emit v as 27/28 (yellow paper); those are shifted down to 0/1.
    """
    if len(sig65) != 65:
        raise TypeMismatch(f"signature must be 65 bytes, got {len(sig65)}")
    v = sig65[64]
    if v >= 27:
        v -= 27
    if v not in (0, 1):
        raise InvalidSignature(f"recovery id {sig65[64]} is not 0/1 or 27/28")
    return bytes(sig65[:64]), v

def recover_public_key(digest_32: bytes, sig: bytes, v: int, mc: bool) -> bytes:
    """Recover the 64-byte uncompressed public key (x||y, no 0x04 prefix).

    With ``mc`` set, high-s signatures are rejected so only the canonical
    low-s form of a signature verifies.
    """
    digest_32 = b32(digest_32)
    if len(sig) != 64:
        raise TypeMismatch(f"signature must be 64 bytes, got {len(sig)}")
    if isinstance(v, bool) or v not in (0, 1):
        raise InvalidSignature(f"recovery id must be 0 or 1, got {v!r}")

    r = int.from_bytes(sig[:32], "big")
    s = int.from_bytes(sig[32:], "big")
    if not 0 < r < SECP256K1_N:
        raise InvalidSignature("r out of range")
    if not 0 < s < SECP256K1_N:
        raise InvalidSignature("s out of range")
    if mc and s > SECP256K1_HALF_N:
        raise InvalidSignature("s is not in canonical low-s form")

    sig65 = bytes(sig) + bytes([v])
    try:
        pub = PublicKey.from_signature_and_message(sig65, digest_32, hasher=None)
    except Exception as exc:  # coincurve raises a plain Exception when no key recovers
        raise RecoveryFailure(f"no public key for signature: {exc}") from exc

    point = pub.format(compressed=False)
    return point[1:]

def recover(digest_32: bytes, sig: bytes, v: int, mc: bool) -> bytes:
    """Recover the 20-byte address that produced ``sig`` over ``digest_32``."""
    return pubkey_to_address(recover_public_key(digest_32, sig, v, mc))

def pubkey_to_address(pubkey_64: bytes) -> bytes:
    # low-order 20 bytes of keccak(x||y)
    return keccak(pubkey_64)[12:]
