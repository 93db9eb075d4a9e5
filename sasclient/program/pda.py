"""
Derived account addresses for the attestation program.

Every helper returns a DerivedAddress (address, bump) so callers can compute
the same account keys the on-chain program will check, without a network
round trip.
"""

from ..address import AddressLike, DerivedAddress, address, find_program_address
from ..constants import (
    ASSOCIATED_TOKEN_PROGRAM_ADDRESS,
    SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
    TOKEN_2022_PROGRAM_ADDRESS,
)
from ..errors import InvalidSeedsError

CREDENTIAL_SEED = b"credential"
SCHEMA_SEED = b"schema"
ATTESTATION_SEED = b"attestation"
ATTESTATION_MINT_SEED = b"attestation_mint"
SCHEMA_MINT_SEED = b"schema_mint"
SAS_SEED = b"sas"


def derive_credential_pda(
    authority: AddressLike,
    name: str,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> DerivedAddress:
    """Credential account owned by `authority` and identified by `name`."""
    return find_program_address(program_address, [CREDENTIAL_SEED, address(authority), name])


def derive_schema_pda(
    credential: AddressLike,
    name: str,
    version: int,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> DerivedAddress:
    """Schema account under a credential; the version is a single seed byte."""
    if not 0 <= version <= 255:
        raise InvalidSeedsError(f"schema version must fit in one byte, got {version}")
    return find_program_address(
        program_address,
        [SCHEMA_SEED, address(credential), name, bytes([version])],
    )


def derive_attestation_pda(
    credential: AddressLike,
    schema: AddressLike,
    nonce: AddressLike,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> DerivedAddress:
    return find_program_address(
        program_address,
        [ATTESTATION_SEED, address(credential), address(schema), address(nonce)],
    )


def derive_attestation_mint_pda(
    attestation: AddressLike,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> DerivedAddress:
    return find_program_address(program_address, [ATTESTATION_MINT_SEED, address(attestation)])


def derive_schema_mint_pda(
    schema: AddressLike,
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> DerivedAddress:
    return find_program_address(program_address, [SCHEMA_MINT_SEED, address(schema)])


def derive_sas_authority_address(
    program_address: AddressLike = SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
) -> DerivedAddress:
    """Program-wide authority that owns tokenized attestation mints."""
    return find_program_address(program_address, [SAS_SEED])


def derive_associated_token_address(
    owner: AddressLike,
    mint: AddressLike,
    token_program: AddressLike = TOKEN_2022_PROGRAM_ADDRESS,
) -> DerivedAddress:
    """Associated token account of `owner` for `mint`."""
    return find_program_address(
        ASSOCIATED_TOKEN_PROGRAM_ADDRESS,
        [address(owner), address(token_program), address(mint)],
    )


__all__ = [
    "CREDENTIAL_SEED",
    "SCHEMA_SEED",
    "ATTESTATION_SEED",
    "ATTESTATION_MINT_SEED",
    "SCHEMA_MINT_SEED",
    "SAS_SEED",
    "derive_credential_pda",
    "derive_schema_pda",
    "derive_attestation_pda",
    "derive_attestation_mint_pda",
    "derive_schema_mint_pda",
    "derive_sas_authority_address",
    "derive_associated_token_address",
]
