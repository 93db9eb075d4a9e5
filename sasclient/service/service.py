"""
Attestation service facade.

This module wires configuration, the payer keypair, the RPC client, the
instruction builder and the transaction assembler together, and exposes the
end-to-end attestation flows: credentials, schemas, attestations and
tokenized attestations.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from ..address import Address, AddressLike, address
from ..config import ClientConfig
from ..constants import SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS, TOKEN_2022_PROGRAM_ADDRESS
from ..keypair import Keypair, load_keypair_from_file
from ..program.accounts import fetch_attestation, fetch_schema
from ..program.instructions import (
    CreateAttestationParams,
    CreateCredentialParams,
    CreateSchemaParams,
    CreateTokenizedAttestationParams,
    InstructionBuilder,
    SasInstructionBuilder,
    TokenizeSchemaParams,
)
from ..program.layout import serialize_attestation_data
from ..program.pda import (
    derive_associated_token_address,
    derive_attestation_mint_pda,
    derive_attestation_pda,
    derive_credential_pda,
    derive_sas_authority_address,
    derive_schema_mint_pda,
    derive_schema_pda,
)
from ..program.token import (
    GroupMemberPointer,
    MetadataPointer,
    MintCloseAuthority,
    NonTransferable,
    PermanentDelegate,
    TokenGroupMember,
    TokenMetadata,
    get_mint_size,
)
from ..rpc.client import RpcClient
from ..transaction.assembler import TransactionAssembler
from ..transaction.message import Instruction
from ..transaction.result import SubmitResult

logger = logging.getLogger(__name__)


@dataclass
class ServiceStatus:
    """Submission counters for one service instance."""
    start_time: datetime = field(default_factory=datetime.now)
    submitted: int = 0
    confirmed: int = 0
    failed: int = 0
    last_signature: Optional[str] = None

    def record(self, result: SubmitResult) -> None:
        self.submitted += 1
        if result.ok:
            self.confirmed += 1
        else:
            self.failed += 1
        if result.signature:
            self.last_signature = result.signature

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "start_time": self.start_time.isoformat(),
            "submitted": self.submitted,
            "confirmed": self.confirmed,
            "failed": self.failed,
            "last_signature": self.last_signature,
        }


@dataclass
class OperationResult:
    """Submission outcome plus the account addresses the operation touched."""
    result: SubmitResult
    addresses: Dict[str, Address] = field(default_factory=dict)
    mint_account_space: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.result.ok

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["addresses"] = {k: str(v) for k, v in self.addresses.items()}
        if self.mint_account_space is not None:
            data["mint_account_space"] = self.mint_account_space
        return data


class AttestationService:
    """
    Drives the attestation program on behalf of a single payer.

    The payer signs and pays for every transaction and acts as the credential
    authority. Addresses are derived locally before each submission, so the
    accounts named in an OperationResult are the ones the program creates.
    """

    def __init__(
        self,
        config: ClientConfig,
        payer: Keypair,
        rpc: Optional[RpcClient] = None,
        builder: Optional[InstructionBuilder] = None,
        assembler: Optional[TransactionAssembler] = None,
    ):
        self.config = config
        self.payer = payer
        self.program_address = (
            address(config.program_address) if config.program_address
            else SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS
        )
        self.rpc = rpc or RpcClient.from_config(config)
        self.builder = builder or SasInstructionBuilder(self.program_address)
        self.assembler = assembler or TransactionAssembler.from_config(config, rpc=self.rpc)
        self.status = ServiceStatus()

        logger.info(f"Attestation service initialized for payer {payer.address} on {config.endpoint}")

    @classmethod
    def from_config(cls, config: Optional[ClientConfig] = None, **kwargs) -> "AttestationService":
        """Create a service whose payer is loaded from `config.keypair_path`.

        Raises:
            KeypairLoadError: the keypair file is missing or malformed
        """
        config = config or ClientConfig.from_env()
        payer = load_keypair_from_file(config.keypair_path)
        return cls(config, payer, **kwargs)

    async def __aenter__(self) -> "AttestationService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.rpc.close()

    @property
    def authority(self) -> Address:
        return self.payer.address

    def credential_address(self, credential_name: str) -> Address:
        return derive_credential_pda(self.authority, credential_name, self.program_address).address

    def schema_address(self, credential_name: str, schema_name: str, version: int = 1) -> Address:
        credential = self.credential_address(credential_name)
        return derive_schema_pda(credential, schema_name, version, self.program_address).address

    async def _submit(self, operation: str, instructions: Sequence[Instruction],
                      addresses: Dict[str, Address],
                      mint_account_space: Optional[int] = None) -> OperationResult:
        for label, key in addresses.items():
            logger.info(f"{operation}: {label} {key}")
        result = await self.assembler.submit(self.payer, instructions)
        self.status.record(result)
        if not result.ok:
            logger.error(f"{operation} failed: {result.error}")
        return OperationResult(result, addresses, mint_account_space)

    async def create_credential(self, name: str, signers: Sequence[AddressLike] = ()) -> OperationResult:
        """Create a credential named `name` with the payer as authority."""
        credential = self.credential_address(name)
        instruction = self.builder.create_credential(CreateCredentialParams(
            payer=self.payer.address,
            authority=self.authority,
            credential=credential,
            name=name,
            signers=[address(s) for s in signers],
        ))
        return await self._submit("create_credential", [instruction], {"credential": credential})

    async def create_schema(
        self,
        credential_name: str,
        name: str,
        description: str,
        layout: bytes,
        field_names: Sequence[str],
        version: int = 1,
    ) -> OperationResult:
        credential = self.credential_address(credential_name)
        schema = derive_schema_pda(credential, name, version, self.program_address).address
        instruction = self.builder.create_schema(CreateSchemaParams(
            payer=self.payer.address,
            authority=self.authority,
            credential=credential,
            schema=schema,
            name=name,
            description=description,
            layout=bytes(layout),
            field_names=list(field_names),
        ))
        return await self._submit("create_schema", [instruction], {
            "credential": credential,
            "schema": schema,
        })

    async def create_attestation(
        self,
        credential_name: str,
        schema_name: str,
        values: Mapping[str, Any],
        nonce: Optional[AddressLike] = None,
        expiry: int = 0,
        version: int = 1,
    ) -> OperationResult:
        """Attest `values` against an existing schema.

        The schema account is fetched to encode `values`; `nonce` defaults to
        the payer address.

        Raises:
            SchemaFetchFailed: the schema account could not be loaded
            AttestationDataError: `values` do not match the schema layout
        """
        credential = self.credential_address(credential_name)
        schema = derive_schema_pda(credential, schema_name, version, self.program_address).address
        nonce = address(nonce) if nonce is not None else self.payer.address
        attestation = derive_attestation_pda(credential, schema, nonce, self.program_address).address

        schema_account = await fetch_schema(self.rpc, schema, self.program_address)
        data = serialize_attestation_data(schema_account, values)

        instruction = self.builder.create_attestation(CreateAttestationParams(
            payer=self.payer.address,
            authority=self.authority,
            credential=credential,
            schema=schema,
            attestation=attestation,
            nonce=nonce,
            data=data,
            expiry=expiry,
        ))
        return await self._submit("create_attestation", [instruction], {
            "credential": credential,
            "schema": schema,
            "attestation": attestation,
        })

    async def tokenize_schema(self, credential_name: str, schema_name: str,
                              max_size: int, version: int = 1) -> OperationResult:
        """Create the token group mint for a schema, holding up to `max_size` members."""
        credential = self.credential_address(credential_name)
        schema = derive_schema_pda(credential, schema_name, version, self.program_address).address
        schema_mint = derive_schema_mint_pda(schema, self.program_address).address
        sas_pda = derive_sas_authority_address(self.program_address).address

        instruction = self.builder.tokenize_schema(TokenizeSchemaParams(
            payer=self.payer.address,
            authority=self.authority,
            credential=credential,
            schema=schema,
            schema_mint=schema_mint,
            sas_pda=sas_pda,
            max_size=max_size,
        ))
        return await self._submit("tokenize_schema", [instruction], {
            "schema": schema,
            "schema_mint": schema_mint,
            "sas_pda": sas_pda,
        })

    async def create_tokenized_attestation(
        self,
        credential_name: str,
        schema_name: str,
        values: Mapping[str, Any],
        name: str,
        symbol: str,
        uri: str,
        nonce: Optional[AddressLike] = None,
        recipient: Optional[AddressLike] = None,
        expiry: int = 0,
        version: int = 1,
    ) -> OperationResult:
        """Attest `values` and mint a non-transferable token to `recipient`.

        `recipient` and `nonce` default to the payer address.
        """
        credential = self.credential_address(credential_name)
        schema = derive_schema_pda(credential, schema_name, version, self.program_address).address
        nonce = address(nonce) if nonce is not None else self.payer.address
        recipient = address(recipient) if recipient is not None else self.payer.address

        attestation = derive_attestation_pda(credential, schema, nonce, self.program_address).address
        attestation_mint = derive_attestation_mint_pda(attestation, self.program_address).address
        schema_mint = derive_schema_mint_pda(schema, self.program_address).address
        sas_pda = derive_sas_authority_address(self.program_address).address
        recipient_token_account = derive_associated_token_address(
            recipient, attestation_mint, TOKEN_2022_PROGRAM_ADDRESS
        ).address

        mint_account_space = attestation_mint_size(sas_pda, attestation_mint, schema_mint, name, symbol, uri)
        logger.info(f"Mint account space: {mint_account_space}")

        schema_account = await fetch_schema(self.rpc, schema, self.program_address)
        data = serialize_attestation_data(schema_account, values)

        instruction = self.builder.create_tokenized_attestation(CreateTokenizedAttestationParams(
            payer=self.payer.address,
            authority=self.authority,
            credential=credential,
            schema=schema,
            attestation=attestation,
            schema_mint=schema_mint,
            attestation_mint=attestation_mint,
            sas_pda=sas_pda,
            recipient=recipient,
            recipient_token_account=recipient_token_account,
            nonce=nonce,
            data=data,
            name=name,
            uri=uri,
            symbol=symbol,
            mint_account_space=mint_account_space,
            expiry=expiry,
        ))
        return await self._submit("create_tokenized_attestation", [instruction], {
            "credential": credential,
            "schema": schema,
            "attestation": attestation,
            "attestation_mint": attestation_mint,
            "schema_mint": schema_mint,
            "sas_pda": sas_pda,
            "recipient_token_account": recipient_token_account,
        }, mint_account_space)

    async def verify_attestation_address(self, credential: AddressLike, schema: AddressLike,
                                         nonce: AddressLike) -> bool:
        """Check that the attestation at the locally derived address exists and
        was created for the same credential, schema and nonce."""
        derived = derive_attestation_pda(credential, schema, nonce, self.program_address).address
        fetched = await fetch_attestation(self.rpc, derived, self.program_address)
        if fetched is None:
            logger.warning(f"No attestation account at derived address {derived}")
            return False

        refetched = derive_attestation_pda(
            fetched.credential, fetched.schema, fetched.nonce, self.program_address
        ).address
        matches = refetched == derived
        if not matches:
            logger.warning(f"Attestation {derived} was created for {refetched}")
        return matches

    def get_service_status(self) -> Dict[str, Any]:
        return self.status.to_dict()


def attestation_mint_size(sas_pda: Address, attestation_mint: Address, schema_mint: Address,
                          name: str, symbol: str, uri: str) -> int:
    """Size of a tokenized attestation mint with the extensions the program installs."""
    return get_mint_size([
        GroupMemberPointer(authority=sas_pda, member_address=attestation_mint),
        NonTransferable(),
        MetadataPointer(authority=sas_pda, metadata_address=attestation_mint),
        PermanentDelegate(delegate=sas_pda),
        MintCloseAuthority(close_authority=sas_pda),
        TokenMetadata(
            update_authority=sas_pda,
            mint=attestation_mint,
            name=name,
            symbol=symbol,
            uri=uri,
        ),
        TokenGroupMember(group=schema_mint, mint=attestation_mint, member_number=1),
    ])


def create_service(config: Optional[ClientConfig] = None, payer: Optional[Keypair] = None,
                   **kwargs) -> AttestationService:
    """
    Factory function to create an AttestationService.

    Args:
        config: Client configuration; read from the environment when omitted
        payer: Signing keypair; loaded from config.keypair_path when omitted
        **kwargs: rpc, builder or assembler overrides

    Returns:
        Configured service instance
    """
    config = config or ClientConfig.from_env()
    if payer is None:
        return AttestationService.from_config(config, **kwargs)
    return AttestationService(config, payer, **kwargs)
