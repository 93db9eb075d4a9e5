"""
Package program covers the attestation program itself: account addresses,
instruction encoding, account layouts, attestation data and mint sizing.
"""

from .pda import (
    ATTESTATION_MINT_SEED,
    ATTESTATION_SEED,
    CREDENTIAL_SEED,
    SAS_SEED,
    SCHEMA_MINT_SEED,
    SCHEMA_SEED,
    derive_associated_token_address,
    derive_attestation_mint_pda,
    derive_attestation_pda,
    derive_credential_pda,
    derive_sas_authority_address,
    derive_schema_mint_pda,
    derive_schema_pda,
)
from .instructions import (
    CreateAttestationParams,
    CreateCredentialParams,
    CreateSchemaParams,
    CreateTokenizedAttestationParams,
    InstructionBuilder,
    SasInstruction,
    SasInstructionBuilder,
    TokenizeSchemaParams,
)
from .layout import (
    SchemaDataType,
    deserialize_attestation_data,
    parse_layout,
    serialize_attestation_data,
)
from .accounts import (
    AccountDiscriminator,
    Attestation,
    Credential,
    Schema,
    fetch_attestation,
    fetch_credential,
    fetch_schema,
)
from .token import (
    GroupMemberPointer,
    MetadataPointer,
    MintCloseAuthority,
    MintExtension,
    NonTransferable,
    PermanentDelegate,
    TokenGroupMember,
    TokenMetadata,
    get_mint_size,
)

__all__ = [
    'ATTESTATION_MINT_SEED',
    'ATTESTATION_SEED',
    'CREDENTIAL_SEED',
    'SAS_SEED',
    'SCHEMA_MINT_SEED',
    'SCHEMA_SEED',
    'derive_associated_token_address',
    'derive_attestation_mint_pda',
    'derive_attestation_pda',
    'derive_credential_pda',
    'derive_sas_authority_address',
    'derive_schema_mint_pda',
    'derive_schema_pda',
    'CreateAttestationParams',
    'CreateCredentialParams',
    'CreateSchemaParams',
    'CreateTokenizedAttestationParams',
    'InstructionBuilder',
    'SasInstruction',
    'SasInstructionBuilder',
    'TokenizeSchemaParams',
    'SchemaDataType',
    'deserialize_attestation_data',
    'parse_layout',
    'serialize_attestation_data',
    'AccountDiscriminator',
    'Attestation',
    'Credential',
    'Schema',
    'fetch_attestation',
    'fetch_credential',
    'fetch_schema',
    'GroupMemberPointer',
    'MetadataPointer',
    'MintCloseAuthority',
    'MintExtension',
    'NonTransferable',
    'PermanentDelegate',
    'TokenGroupMember',
    'TokenMetadata',
    'get_mint_size',
]
