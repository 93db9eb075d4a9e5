"""
Attestation program account layouts and fetch helpers.

Every account starts with a one-byte discriminator. Byte blobs and vectors
carry u32 length prefixes, matching the instruction encoding.
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional

from .layout import deserialize_attestation_data
from ..address import Address, AddressLike, address
from ..codec import BinaryReader, BinaryWriter
from ..constants import SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS
from ..errors import AccountDecodeError, NetworkUnavailable, SchemaFetchFailed
from ..rpc.client import RpcClient

logger = logging.getLogger(__name__)


class AccountDiscriminator(IntEnum):
    CREDENTIAL = 0
    SCHEMA = 1
    ATTESTATION = 2


def _reader(data: bytes, expected: AccountDiscriminator) -> BinaryReader:
    reader = BinaryReader(data)
    try:
        found = reader.u8()
    except ValueError:
        raise AccountDecodeError("empty account data")
    if found != expected:
        raise AccountDecodeError(f"expected {expected.name.lower()} account, discriminator is {found}")
    return reader


@dataclass
class Credential:
    authority: Address
    name: str
    authorized_signers: List[Address] = field(default_factory=list)

    @classmethod
    def decode(cls, data: bytes) -> "Credential":
        reader = _reader(data, AccountDiscriminator.CREDENTIAL)
        try:
            return cls(
                authority=reader.address(),
                name=reader.string(),
                authorized_signers=reader.array(lambda r: r.address()),
            )
        except ValueError as e:
            raise AccountDecodeError(f"credential: {e}")

    def encode(self) -> bytes:
        writer = BinaryWriter().u8(AccountDiscriminator.CREDENTIAL)
        writer.address(self.authority).string(self.name)
        writer.array(self.authorized_signers, lambda w, s: w.address(s))
        return writer.to_bytes()


@dataclass
class Schema:
    credential: Address
    name: str
    description: str
    layout: bytes
    field_names: List[str]
    is_paused: bool = False
    version: int = 1

    @classmethod
    def decode(cls, data: bytes) -> "Schema":
        reader = _reader(data, AccountDiscriminator.SCHEMA)
        try:
            credential = reader.address()
            name = reader.string()
            description = reader.string()
            layout = reader.blob()
            field_names = BinaryReader(reader.blob()).array(lambda r: r.string())
            is_paused = reader.boolean()
            version = reader.u8()
        except ValueError as e:
            raise AccountDecodeError(f"schema: {e}")
        return cls(
            credential=credential,
            name=name,
            description=description,
            layout=layout,
            field_names=field_names,
            is_paused=is_paused,
            version=version,
        )

    def encode(self) -> bytes:
        names = BinaryWriter().array(self.field_names, lambda w, n: w.string(n)).to_bytes()
        writer = BinaryWriter().u8(AccountDiscriminator.SCHEMA)
        writer.address(self.credential).string(self.name).string(self.description)
        writer.blob(bytes(self.layout)).blob(names)
        writer.boolean(self.is_paused).u8(self.version)
        return writer.to_bytes()


@dataclass
class Attestation:
    nonce: Address
    credential: Address
    schema: Address
    data: bytes
    signer: Address
    expiry: int
    token_account: Address

    @classmethod
    def decode(cls, data: bytes) -> "Attestation":
        reader = _reader(data, AccountDiscriminator.ATTESTATION)
        try:
            return cls(
                nonce=reader.address(),
                credential=reader.address(),
                schema=reader.address(),
                data=reader.blob(),
                signer=reader.address(),
                expiry=reader.i64(),
                token_account=reader.address(),
            )
        except ValueError as e:
            raise AccountDecodeError(f"attestation: {e}")

    def encode(self) -> bytes:
        writer = BinaryWriter().u8(AccountDiscriminator.ATTESTATION)
        writer.address(self.nonce).address(self.credential).address(self.schema)
        writer.blob(self.data).address(self.signer).i64(self.expiry).address(self.token_account)
        return writer.to_bytes()

    def decoded_data(self, schema: Schema) -> Dict[str, Any]:
        return deserialize_attestation_data(schema, self.data)


async def _fetch_owned(rpc: RpcClient, account: AddressLike, program_address: AddressLike) -> Optional[bytes]:
    key = address(account)
    info = await rpc.get_account_info(key)
    if info is None:
        return None
    if info.owner != address(program_address):
        raise AccountDecodeError(f"account {key} is owned by {info.owner}, not {address(program_address)}")
    return info.data


async def fetch_schema(
    rpc: RpcClient,
    schema: AddressLike,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> Schema:
    """Load a schema account.

    Raises:
        SchemaFetchFailed: the account is missing, unreachable or not a schema
    """
    key = address(schema)
    try:
        data = await _fetch_owned(rpc, key, program_address)
        if data is None:
            raise SchemaFetchFailed(f"schema account {key} does not exist")
        decoded = Schema.decode(data)
    except (NetworkUnavailable, AccountDecodeError) as e:
        raise SchemaFetchFailed(f"unable to load schema {key}: {e}")
    logger.debug(f"Fetched schema {key}: {decoded.name} v{decoded.version}")
    return decoded


async def fetch_credential(
    rpc: RpcClient,
    credential: AddressLike,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> Optional[Credential]:
    data = await _fetch_owned(rpc, credential, program_address)
    return Credential.decode(data) if data is not None else None


async def fetch_attestation(
    rpc: RpcClient,
    attestation: AddressLike,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> Optional[Attestation]:
    data = await _fetch_owned(rpc, attestation, program_address)
    return Attestation.decode(data) if data is not None else None
