"""Pair key derivation for (sale token, hold token) pairs"""
import hashlib
import re
from typing import Protocol

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(address: str) -> str:
    """Return the lowercase form of a 0x-prefixed 20 byte hex address"""
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        raise ValueError(f"Invalid token address: {address!r}")
    return address.lower()


class PairKeyDeriver(Protocol):
    def derive(self, sale_token: str, hold_token: str) -> bytes:
        ...


class PackedAddressKeyDeriver:
    """Hash of the two packed addresses, sale token first.

    Order sensitive: derive(a, b) and derive(b, a) are different keys.
    """

    def derive(self, sale_token: str, hold_token: str) -> bytes:
        packed = (
            bytes.fromhex(normalize_address(sale_token)[2:])
            + bytes.fromhex(normalize_address(hold_token)[2:])
        )
        return hashlib.sha3_256(packed).digest()


DEFAULT_KEY_DERIVER = PackedAddressKeyDeriver()
