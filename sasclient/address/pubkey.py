"""
32-byte account addresses rendered as base58 strings.
"""

from dataclasses import dataclass
from typing import Union

import base58

PUBLIC_KEY_LENGTH = 32


@dataclass(frozen=True)
class Address:
    """An immutable 32-byte account key."""
    raw: bytes

    def __post_init__(self):
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError(f"address bytes expected, got {type(self.raw).__name__}")
        if len(self.raw) != PUBLIC_KEY_LENGTH:
            raise ValueError(f"address must be {PUBLIC_KEY_LENGTH} bytes, got {len(self.raw)}")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_string(cls, value: str) -> "Address":
        """Decode a base58 address string."""
        try:
            decoded = base58.b58decode(value)
        except ValueError as e:
            raise ValueError(f"invalid base58 address {value!r}: {e}")
        return cls(decoded)

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return base58.b58encode(self.raw).decode("ascii")

    def __repr__(self) -> str:
        return f"Address({str(self)!r})"


AddressLike = Union[Address, str, bytes]


def address(value: AddressLike) -> Address:
    """Coerce a base58 string, raw bytes or Address into an Address."""
    if isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.from_string(value)
    if isinstance(value, (bytes, bytearray)):
        return Address(bytes(value))
    raise TypeError(f"cannot build an address from {type(value).__name__}")
