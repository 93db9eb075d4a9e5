"""
Instruction builders for the attestation program.

Callers depend on the InstructionBuilder interface: one method per operation,
each taking a typed params object and returning an Instruction. The
SasInstructionBuilder encodes the program's wire format: a one-byte
discriminator followed by little-endian fields with u32 length prefixes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from ..address import Address, AddressLike, address
from ..codec import BinaryWriter
from ..constants import (
    ASSOCIATED_TOKEN_PROGRAM_ADDRESS,
    SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
    SYSTEM_PROGRAM_ADDRESS,
    TOKEN_2022_PROGRAM_ADDRESS,
)
from ..errors import TransactionValidationError
from ..transaction.message import AccountMeta, Instruction


class SasInstruction(IntEnum):
    """Instruction discriminators."""
    CREATE_CREDENTIAL = 0
    CREATE_SCHEMA = 1
    CREATE_ATTESTATION = 6
    TOKENIZE_SCHEMA = 9
    CREATE_TOKENIZED_ATTESTATION = 10


@dataclass
class CreateCredentialParams:
    payer: Address
    authority: Address
    credential: Address
    name: str
    signers: List[Address] = field(default_factory=list)
    system_program: Address = SYSTEM_PROGRAM_ADDRESS


@dataclass
class CreateSchemaParams:
    payer: Address
    authority: Address
    credential: Address
    schema: Address
    name: str
    description: str
    layout: bytes
    field_names: List[str]
    system_program: Address = SYSTEM_PROGRAM_ADDRESS


@dataclass
class CreateAttestationParams:
    payer: Address
    authority: Address
    credential: Address
    schema: Address
    attestation: Address
    nonce: Address
    data: bytes
    expiry: int = 0
    system_program: Address = SYSTEM_PROGRAM_ADDRESS


@dataclass
class TokenizeSchemaParams:
    payer: Address
    authority: Address
    credential: Address
    schema: Address
    schema_mint: Address
    sas_pda: Address
    max_size: int
    system_program: Address = SYSTEM_PROGRAM_ADDRESS
    token_program: Address = TOKEN_2022_PROGRAM_ADDRESS


@dataclass
class CreateTokenizedAttestationParams:
    payer: Address
    authority: Address
    credential: Address
    schema: Address
    attestation: Address
    schema_mint: Address
    attestation_mint: Address
    sas_pda: Address
    recipient: Address
    recipient_token_account: Address
    nonce: Address
    data: bytes
    name: str
    uri: str
    symbol: str
    mint_account_space: int
    expiry: int = 0
    system_program: Address = SYSTEM_PROGRAM_ADDRESS
    token_program: Address = TOKEN_2022_PROGRAM_ADDRESS
    associated_token_program: Address = ASSOCIATED_TOKEN_PROGRAM_ADDRESS


class InstructionBuilder(ABC):
    """Abstract interface for building attestation program instructions."""

    @abstractmethod
    def create_credential(self, params: CreateCredentialParams) -> Instruction:
        """Create a credential owned by the authority."""
        pass

    @abstractmethod
    def create_schema(self, params: CreateSchemaParams) -> Instruction:
        """Create a schema under an existing credential."""
        pass

    @abstractmethod
    def create_attestation(self, params: CreateAttestationParams) -> Instruction:
        """Create an attestation against an existing schema."""
        pass

    @abstractmethod
    def tokenize_schema(self, params: TokenizeSchemaParams) -> Instruction:
        """Create the token group mint backing tokenized attestations."""
        pass

    @abstractmethod
    def create_tokenized_attestation(self, params: CreateTokenizedAttestationParams) -> Instruction:
        """Create an attestation and mint its non-transferable token to the recipient."""
        pass


def _ws(key: AddressLike) -> AccountMeta:
    return AccountMeta(address(key), is_signer=True, is_writable=True)


def _s(key: AddressLike) -> AccountMeta:
    return AccountMeta(address(key), is_signer=True)


def _w(key: AddressLike) -> AccountMeta:
    return AccountMeta(address(key), is_writable=True)


def _r(key: AddressLike) -> AccountMeta:
    return AccountMeta(address(key))


class SasInstructionBuilder(InstructionBuilder):
    """Encodes instructions for the attestation program at `program_address`."""

    def __init__(self, program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS):
        self.program_address = address(program_address)

    def _instruction(self, accounts: List[AccountMeta], writer: BinaryWriter) -> Instruction:
        return Instruction(
            program_address=self.program_address,
            accounts=tuple(accounts),
            data=writer.to_bytes(),
        )

    def _writer(self, discriminator: SasInstruction) -> BinaryWriter:
        return BinaryWriter().u8(int(discriminator))

    def create_credential(self, params: CreateCredentialParams) -> Instruction:
        writer = self._writer(SasInstruction.CREATE_CREDENTIAL)
        try:
            writer.string(params.name)
            writer.array(params.signers, lambda w, s: w.address(address(s)))
        except ValueError as e:
            raise TransactionValidationError(f"create_credential: {e}")
        return self._instruction([
            _ws(params.payer),
            _w(params.credential),
            _s(params.authority),
            _r(params.system_program),
        ], writer)

    def create_schema(self, params: CreateSchemaParams) -> Instruction:
        writer = self._writer(SasInstruction.CREATE_SCHEMA)
        try:
            writer.string(params.name)
            writer.string(params.description)
            writer.blob(bytes(params.layout))
            writer.array(params.field_names, lambda w, n: w.string(n))
        except ValueError as e:
            raise TransactionValidationError(f"create_schema: {e}")
        return self._instruction([
            _ws(params.payer),
            _s(params.authority),
            _r(params.credential),
            _w(params.schema),
            _r(params.system_program),
        ], writer)

    def create_attestation(self, params: CreateAttestationParams) -> Instruction:
        writer = self._writer(SasInstruction.CREATE_ATTESTATION)
        try:
            writer.address(address(params.nonce))
            writer.blob(bytes(params.data))
            writer.i64(params.expiry)
        except ValueError as e:
            raise TransactionValidationError(f"create_attestation: {e}")
        return self._instruction([
            _ws(params.payer),
            _s(params.authority),
            _r(params.credential),
            _r(params.schema),
            _w(params.attestation),
            _r(params.system_program),
        ], writer)

    def tokenize_schema(self, params: TokenizeSchemaParams) -> Instruction:
        writer = self._writer(SasInstruction.TOKENIZE_SCHEMA)
        try:
            writer.u64(params.max_size)
        except ValueError as e:
            raise TransactionValidationError(f"tokenize_schema: {e}")
        return self._instruction([
            _ws(params.payer),
            _s(params.authority),
            _r(params.credential),
            _r(params.schema),
            _w(params.schema_mint),
            _r(params.sas_pda),
            _r(params.system_program),
            _r(params.token_program),
        ], writer)

    def create_tokenized_attestation(self, params: CreateTokenizedAttestationParams) -> Instruction:
        writer = self._writer(SasInstruction.CREATE_TOKENIZED_ATTESTATION)
        try:
            writer.address(address(params.nonce))
            writer.blob(bytes(params.data))
            writer.i64(params.expiry)
            writer.string(params.name)
            writer.string(params.uri)
            writer.string(params.symbol)
            writer.u16(params.mint_account_space)
        except ValueError as e:
            raise TransactionValidationError(f"create_tokenized_attestation: {e}")
        return self._instruction([
            _ws(params.payer),
            _s(params.authority),
            _r(params.credential),
            _r(params.schema),
            _w(params.attestation),
            _r(params.system_program),
            _w(params.schema_mint),
            _w(params.attestation_mint),
            _r(params.sas_pda),
            _w(params.recipient_token_account),
            _r(params.recipient),
            _r(params.token_program),
            _r(params.associated_token_program),
        ], writer)
