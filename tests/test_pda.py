import pytest

from sasclient.address import Address, find_program_address
from sasclient.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ADDRESS,
    SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
    TOKEN_2022_PROGRAM_ADDRESS,
)
from sasclient.errors import InvalidSeedsError
from sasclient.program.pda import (
    derive_associated_token_address,
    derive_attestation_mint_pda,
    derive_attestation_pda,
    derive_credential_pda,
    derive_sas_authority_address,
    derive_schema_mint_pda,
    derive_schema_pda,
)

AUTHORITY = Address(bytes(range(1, 33)))
NONCE = Address.from_string("Dk5hHsjnaD7GZHGpgU8dunbaBVi7vW5mo4QQpjVWWt94")


def test_credential_pda_stable():
    first = derive_credential_pda(AUTHORITY, "test28")
    assert derive_credential_pda(AUTHORITY, "test28") == first
    assert derive_credential_pda(str(AUTHORITY), "test28") == first
    expected = find_program_address(
        SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS, [b"credential", bytes(AUTHORITY), b"test28"]
    )
    assert first == expected
    assert str(first.address) == "3MLtyjga9cB5tXntQxcsL58rVy6yXyGC8cLVBQsCkFK2"
    assert first.bump == 253


def test_credential_pda_depends_on_name_and_authority():
    base = derive_credential_pda(AUTHORITY, "test28").address
    assert derive_credential_pda(AUTHORITY, "test29").address != base
    assert derive_credential_pda(Address(bytes(32)), "test28").address != base


def test_schema_pda_version_byte():
    credential = derive_credential_pda(AUTHORITY, "test28").address
    v1 = derive_schema_pda(credential, "test28", 1)
    v2 = derive_schema_pda(credential, "test28", 2)
    assert v1.address != v2.address
    expected = find_program_address(
        SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
        [b"schema", bytes(credential), b"test28", bytes([1])],
    )
    assert v1 == expected
    assert str(v1.address) == "2z5Mi6RubS5D6TS1agk4ycBsiuajyYSCEFv2kvoheiAT"
    assert v1.bump == 255


@pytest.mark.parametrize("version", [-1, 256])
def test_schema_pda_rejects_wide_version(version):
    with pytest.raises(InvalidSeedsError):
        derive_schema_pda(AUTHORITY, "test28", version)


def test_attestation_and_mint_pdas():
    credential = derive_credential_pda(AUTHORITY, "test28").address
    schema = derive_schema_pda(credential, "test28", 1).address
    attestation = derive_attestation_pda(credential, schema, NONCE)
    assert attestation == find_program_address(
        SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
        [b"attestation", bytes(credential), bytes(schema), bytes(NONCE)],
    )
    assert derive_attestation_pda(schema, credential, NONCE).address != attestation.address

    mint = derive_attestation_mint_pda(attestation.address)
    assert mint == find_program_address(
        SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS, [b"attestation_mint", bytes(attestation.address)]
    )
    schema_mint = derive_schema_mint_pda(schema)
    assert schema_mint == find_program_address(
        SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS, [b"schema_mint", bytes(schema)]
    )
    assert mint.address != schema_mint.address


def test_sas_authority_address():
    assert derive_sas_authority_address() == find_program_address(
        SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS, [b"sas"]
    )


def test_custom_program_address():
    other = Address(bytes([9] * 32))
    assert derive_sas_authority_address(other) != derive_sas_authority_address()


def test_associated_token_address():
    mint = Address(bytes([5] * 32))
    derived = derive_associated_token_address(AUTHORITY, mint)
    assert derived == find_program_address(
        ASSOCIATED_TOKEN_PROGRAM_ADDRESS,
        [bytes(AUTHORITY), bytes(TOKEN_2022_PROGRAM_ADDRESS), bytes(mint)],
    )
