"""EIP-712 type and struct encoding over an explicit, acyclic type set.

A :class:`TypeSet` maps struct names to their ordered ``(field, type)``
lists. The reference graph is checked once at construction and the
canonical type strings and type hashes are cached, so hashing a struct
instance never walks the graph dynamically.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

from eth_utils import to_canonical_address

from connected_accounts.errors import (
    CyclicType,
    MissingField,
    TypeMismatch,
    UnknownType,
)
from connected_accounts.sign_core import addr, eip712_digest, i256, keccak, u256

Field = tuple[str, str]

_INT_RE = re.compile(r"^(u?)int([1-9]\d*)?$")
_BYTES_N_RE = re.compile(r"^bytes([1-9]\d*)$")
_ARRAY_RE = re.compile(r"^(.+)\[(\d*)\]$")


def _is_atomic(type_name: str) -> bool:
    if type_name in ("string", "bytes", "bool", "address"):
        return True
    m = _INT_RE.match(type_name)
    if m:
        bits = int(m.group(2) or 256)
        return bits % 8 == 0 and 8 <= bits <= 256
    m = _BYTES_N_RE.match(type_name)
    if m:
        return 1 <= int(m.group(1)) <= 32
    return False


def _base_type(type_name: str) -> str:
    while True:
        m = _ARRAY_RE.match(type_name)
        if not m:
            return type_name
        type_name = m.group(1)


class TypeSet:
    """Validated set of EIP-712 struct definitions."""

    def __init__(self, definitions: Mapping[str, Sequence[Field]]) -> None:
        self._fields: dict[str, tuple[Field, ...]] = {
            name: tuple((f, t) for f, t in fields) for name, fields in definitions.items()
        }
        self._deps: dict[str, frozenset[str]] = {}
        for name in self._fields:
            self._collect(name, ())
        self._encoded = {name: self._build_encode_type(name) for name in self._fields}
        self._hashes = {name: keccak(s.encode("utf-8")) for name, s in self._encoded.items()}

    # ---------- graph ----------

    def _collect(self, name: str, path: tuple[str, ...]) -> frozenset[str]:
        if name in path:
            cycle = " -> ".join(path[path.index(name):] + (name,))
            raise CyclicType(f"recursive struct reference: {cycle}")
        if name in self._deps:
            return self._deps[name]

        deps: set[str] = set()
        for field, type_name in self._fields[name]:
            base = _base_type(type_name)
            if _is_atomic(base):
                continue
            if base not in self._fields:
                raise UnknownType(f"{name}.{field} references undefined type {base!r}")
            deps.add(base)
            deps |= self._collect(base, path + (name,))

        self._deps[name] = frozenset(deps)
        return self._deps[name]

    def _signature(self, name: str) -> str:
        return name + "(" + ",".join(f"{t} {f}" for f, t in self._fields[name]) + ")"

    def _build_encode_type(self, name: str) -> str:
        return self._signature(name) + "".join(self._signature(d) for d in sorted(self._deps[name]))

    # ---------- public ----------

    def dependencies(self, name: str) -> frozenset[str]:
        self._require(name)
        return self._deps[name]

    def encode_type(self, name: str) -> str:
        self._require(name)
        return self._encoded[name]

    def type_hash(self, name: str) -> bytes:
        self._require(name)
        return self._hashes[name]

    def hash_struct(self, name: str, values: Mapping[str, Any]) -> bytes:
        return keccak(self.encode_data(name, values))

    def encode_data(self, name: str, values: Mapping[str, Any]) -> bytes:
        """type_hash followed by one 32-byte word per field, in declaration order."""
        self._require(name)
        if not isinstance(values, Mapping):
            raise TypeMismatch(f"{name} value must be a mapping, got {type(values).__name__}")
        words = [self._hashes[name]]
        for field, type_name in self._fields[name]:
            if field not in values:
                raise MissingField(f"{name}.{field} is missing")
            words.append(self.encode_value(type_name, values[field], f"{name}.{field}"))
        return b"".join(words)

    def encode_value(self, type_name: str, value: Any, where: str = "value") -> bytes:
        if type_name in self._fields:
            return self.hash_struct(type_name, value)

        m = _ARRAY_RE.match(type_name)
        if m:
            item_type, size = m.group(1), m.group(2)
            if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
                raise TypeMismatch(f"{where} must be a list for {type_name}")
            if size and len(value) != int(size):
                raise TypeMismatch(f"{where} must have {size} items, got {len(value)}")
            return keccak(b"".join(
                self.encode_value(item_type, item, f"{where}[{i}]") for i, item in enumerate(value)
            ))

        return _encode_atomic(type_name, value, where)

    def _require(self, name: str) -> None:
        if name not in self._fields:
            raise UnknownType(f"undefined struct type {name!r}")


def _encode_atomic(type_name: str, value: Any, where: str) -> bytes:
    if type_name == "string":
        if not isinstance(value, str):
            raise TypeMismatch(f"{where} must be a string")
        return keccak(value.encode("utf-8"))

    if type_name == "bytes":
        if not isinstance(value, (bytes, bytearray)):
            raise TypeMismatch(f"{where} must be bytes")
        return keccak(bytes(value))

    if type_name == "bool":
        if not isinstance(value, bool):
            raise TypeMismatch(f"{where} must be a bool")
        return u256(int(value))

    if type_name == "address":
        try:
            return addr(to_canonical_address(value))
        except (TypeError, ValueError) as exc:
            raise TypeMismatch(f"{where} is not an address: {exc}") from exc

    m = _BYTES_N_RE.match(type_name)
    if m:
        size = int(m.group(1))
        if not isinstance(value, (bytes, bytearray)) or len(value) != size:
            raise TypeMismatch(f"{where} must be exactly {size} bytes")
        return bytes(value).ljust(32, b"\x00")

    m = _INT_RE.match(type_name)
    if m:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeMismatch(f"{where} must be an integer")
        bits = int(m.group(2) or 256)
        if m.group(1):
            if not 0 <= value < (1 << bits):
                raise TypeMismatch(f"{where} out of range for {type_name}")
            return u256(value)
        if not -(1 << (bits - 1)) <= value < (1 << (bits - 1)):
            raise TypeMismatch(f"{where} out of range for {type_name}")
        return i256(value)

    raise UnknownType(f"{where} has unsupported type {type_name!r}")


def hash_typed_data(types: TypeSet, domain_separator: bytes, primary_type: str, message: Mapping[str, Any]) -> bytes:
    """Full EIP-712 signing digest: keccak(0x1901 || domainSeparator || hashStruct(message))."""
    return eip712_digest(domain_separator, types.hash_struct(primary_type, message))
