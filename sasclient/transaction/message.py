"""
Legacy transaction messages and their wire encoding.

Account keys are ordered writable signers, readonly signers, writable
non-signers, readonly non-signers with the fee payer always first. Within a
group keys keep the order they were first referenced in, so later
instructions can rely on accounts introduced by earlier ones.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import base58

from ..address import Address, AddressLike, address
from ..errors import TransactionValidationError

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 64
# Maximum serialized transaction size accepted by the network
PACKET_DATA_SIZE = 1232


def encode_compact_u16(value: int) -> bytes:
    """Encode an integer as a 1-3 byte compact-u16 (7 bits per byte)."""
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"compact-u16 out of range: {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_compact_u16(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Return (value, bytes consumed)."""
    value = 0
    for i in range(3):
        if offset + i >= len(data):
            raise ValueError("truncated compact-u16")
        byte = data[offset + i]
        value |= (byte & 0x7F) << (7 * i)
        if not byte & 0x80:
            return value, i + 1
    raise ValueError("compact-u16 longer than 3 bytes")


@dataclass(frozen=True)
class AccountMeta:
    """Account reference inside an instruction."""
    address: Address
    is_signer: bool = False
    is_writable: bool = False


@dataclass(frozen=True)
class Instruction:
    """A program invocation: target program, ordered accounts, opaque data."""
    program_address: Address
    accounts: Tuple[AccountMeta, ...] = ()
    data: bytes = b""


@dataclass(frozen=True)
class MessageHeader:
    num_required_signatures: int
    num_readonly_signed_accounts: int
    num_readonly_unsigned_accounts: int


@dataclass(frozen=True)
class CompiledInstruction:
    program_id_index: int
    account_indices: Tuple[int, ...]
    data: bytes


@dataclass(frozen=True)
class Message:
    header: MessageHeader
    account_keys: Tuple[Address, ...]
    recent_blockhash: str
    instructions: Tuple[CompiledInstruction, ...]

    @property
    def fee_payer(self) -> Address:
        return self.account_keys[0]

    @property
    def signer_keys(self) -> Tuple[Address, ...]:
        return self.account_keys[:self.header.num_required_signatures]

    def serialize(self) -> bytes:
        out = bytearray([
            self.header.num_required_signatures,
            self.header.num_readonly_signed_accounts,
            self.header.num_readonly_unsigned_accounts,
        ])
        out += encode_compact_u16(len(self.account_keys))
        for key in self.account_keys:
            out += bytes(key)
        out += _decode_blockhash(self.recent_blockhash)
        out += encode_compact_u16(len(self.instructions))
        for ix in self.instructions:
            out.append(ix.program_id_index)
            out += encode_compact_u16(len(ix.account_indices))
            out += bytes(ix.account_indices)
            out += encode_compact_u16(len(ix.data))
            out += ix.data
        return bytes(out)


@dataclass
class _KeyFlags:
    is_signer: bool = False
    is_writable: bool = False
    is_invoked: bool = False


def _decode_blockhash(blockhash: str) -> bytes:
    try:
        raw = base58.b58decode(blockhash)
    except ValueError as e:
        raise TransactionValidationError(f"invalid blockhash {blockhash!r}: {e}")
    if len(raw) != 32:
        raise TransactionValidationError(f"blockhash must decode to 32 bytes, got {len(raw)}")
    return raw


def compile_message(
    fee_payer: AddressLike,
    instructions: Sequence[Instruction],
    recent_blockhash: str,
) -> Message:
    """Compile instructions into a legacy message paid for by `fee_payer`."""
    if not instructions:
        raise TransactionValidationError("transaction must contain at least one instruction")
    _decode_blockhash(recent_blockhash)

    payer = address(fee_payer)
    keys: Dict[Address, _KeyFlags] = {payer: _KeyFlags(is_signer=True, is_writable=True)}
    for ix in instructions:
        for meta in ix.accounts:
            flags = keys.setdefault(meta.address, _KeyFlags())
            flags.is_signer = flags.is_signer or meta.is_signer
            flags.is_writable = flags.is_writable or meta.is_writable
        keys.setdefault(ix.program_address, _KeyFlags()).is_invoked = True

    groups: List[List[Address]] = [[], [], [], []]
    for key, flags in keys.items():
        if flags.is_signer and flags.is_invoked:
            raise TransactionValidationError(f"program {key} cannot be a signer")
        if flags.is_signer:
            groups[0 if flags.is_writable else 1].append(key)
        else:
            groups[2 if flags.is_writable else 3].append(key)

    account_keys = tuple(k for group in groups for k in group)
    if len(account_keys) > 256:
        raise TransactionValidationError(f"too many account keys: {len(account_keys)}")
    index = {key: i for i, key in enumerate(account_keys)}

    compiled = tuple(
        CompiledInstruction(
            program_id_index=index[ix.program_address],
            account_indices=tuple(index[m.address] for m in ix.accounts),
            data=bytes(ix.data),
        )
        for ix in instructions
    )
    header = MessageHeader(
        num_required_signatures=len(groups[0]) + len(groups[1]),
        num_readonly_signed_accounts=len(groups[1]),
        num_readonly_unsigned_accounts=len(groups[3]),
    )
    logger.debug(
        f"Compiled message: {len(compiled)} instructions, {len(account_keys)} accounts, "
        f"{header.num_required_signatures} signers"
    )
    return Message(
        header=header,
        account_keys=account_keys,
        recent_blockhash=recent_blockhash,
        instructions=compiled,
    )
