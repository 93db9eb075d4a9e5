"""
Token-2022 mint account sizing.

A mint with extensions is laid out as the 165-byte base account, one
account-type byte, then one TLV entry per extension (u16 type, u16 length,
payload).
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

from ..address import Address

MINT_SIZE = 82
BASE_ACCOUNT_SIZE = 165
ACCOUNT_TYPE_SIZE = 1
TLV_HEADER_SIZE = 4

_PUBKEY = 32


class MintExtension:
    """Base class for extensions that contribute to the mint account size."""

    def size(self) -> int:
        raise NotImplementedError


@dataclass
class GroupMemberPointer(MintExtension):
    authority: Optional[Address] = None
    member_address: Optional[Address] = None

    def size(self) -> int:
        return 2 * _PUBKEY


@dataclass
class NonTransferable(MintExtension):
    def size(self) -> int:
        return 0


@dataclass
class MetadataPointer(MintExtension):
    authority: Optional[Address] = None
    metadata_address: Optional[Address] = None

    def size(self) -> int:
        return 2 * _PUBKEY


@dataclass
class PermanentDelegate(MintExtension):
    delegate: Optional[Address] = None

    def size(self) -> int:
        return _PUBKEY


@dataclass
class MintCloseAuthority(MintExtension):
    close_authority: Optional[Address] = None

    def size(self) -> int:
        return _PUBKEY


def _str_len(value: str) -> int:
    return 4 + len(value.encode("utf-8"))


@dataclass
class TokenMetadata(MintExtension):
    update_authority: Optional[Address] = None
    mint: Optional[Address] = None
    name: str = ""
    symbol: str = ""
    uri: str = ""
    additional_metadata: Dict[str, str] = field(default_factory=dict)

    def size(self) -> int:
        total = 2 * _PUBKEY + _str_len(self.name) + _str_len(self.symbol) + _str_len(self.uri)
        total += 4
        for key, value in self.additional_metadata.items():
            total += _str_len(key) + _str_len(value)
        return total


@dataclass
class TokenGroupMember(MintExtension):
    mint: Optional[Address] = None
    group: Optional[Address] = None
    member_number: int = 0

    def size(self) -> int:
        return 2 * _PUBKEY + 8


def get_mint_size(extensions: Optional[Sequence[MintExtension]] = None) -> int:
    """Bytes needed for a mint account carrying `extensions`."""
    if not extensions:
        return MINT_SIZE
    return BASE_ACCOUNT_SIZE + ACCOUNT_TYPE_SIZE + sum(TLV_HEADER_SIZE + e.size() for e in extensions)
