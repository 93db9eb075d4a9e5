import pytest

from sasclient.address import Address
from sasclient.codec import BinaryReader
from sasclient.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ADDRESS,
    SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
    SYSTEM_PROGRAM_ADDRESS,
    TOKEN_2022_PROGRAM_ADDRESS,
)
from sasclient.errors import TransactionValidationError
from sasclient.program.instructions import (
    CreateAttestationParams,
    CreateCredentialParams,
    CreateSchemaParams,
    CreateTokenizedAttestationParams,
    SasInstruction,
    SasInstructionBuilder,
    TokenizeSchemaParams,
)


def key(n):
    return Address(bytes([n] * 32))


PAYER, AUTHORITY, CREDENTIAL, SCHEMA, ATTESTATION = key(1), key(2), key(3), key(4), key(5)


def flags(ix):
    return [(m.address, m.is_signer, m.is_writable) for m in ix.accounts]


@pytest.fixture
def builder():
    return SasInstructionBuilder()


def test_create_credential(builder):
    ix = builder.create_credential(CreateCredentialParams(
        payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, name="test28", signers=[key(7), key(8)],
    ))
    assert ix.program_address == SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS
    assert flags(ix) == [
        (PAYER, True, True),
        (CREDENTIAL, False, True),
        (AUTHORITY, True, False),
        (SYSTEM_PROGRAM_ADDRESS, False, False),
    ]
    reader = BinaryReader(ix.data)
    assert reader.u8() == SasInstruction.CREATE_CREDENTIAL
    assert reader.string() == "test28"
    assert reader.array(lambda r: r.address()) == [key(7), key(8)]
    assert reader.remaining == 0


def test_create_schema(builder):
    ix = builder.create_schema(CreateSchemaParams(
        payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, schema=SCHEMA,
        name="test28", description="test desc", layout=bytes([12, 12, 12]),
        field_names=["name", "age", "country"],
    ))
    assert flags(ix)[3] == (SCHEMA, False, True)
    reader = BinaryReader(ix.data)
    assert reader.u8() == 1
    assert reader.string() == "test28"
    assert reader.string() == "test desc"
    assert reader.blob() == bytes([12, 12, 12])
    assert reader.array(lambda r: r.string()) == ["name", "age", "country"]
    assert reader.remaining == 0


def test_create_attestation(builder):
    ix = builder.create_attestation(CreateAttestationParams(
        payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, schema=SCHEMA,
        attestation=ATTESTATION, nonce=key(9), data=b"\x01\x02", expiry=-5,
    ))
    assert [a for a, _, writable in flags(ix) if writable] == [PAYER, ATTESTATION]
    reader = BinaryReader(ix.data)
    assert reader.u8() == 6
    assert reader.address() == key(9)
    assert reader.blob() == b"\x01\x02"
    assert reader.i64() == -5


def test_tokenize_schema(builder):
    ix = builder.tokenize_schema(TokenizeSchemaParams(
        payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, schema=SCHEMA,
        schema_mint=key(10), sas_pda=key(11), max_size=100,
    ))
    assert ix.data == bytes([9]) + (100).to_bytes(8, "little")
    assert flags(ix)[-1] == (TOKEN_2022_PROGRAM_ADDRESS, False, False)


def test_create_tokenized_attestation(builder):
    ix = builder.create_tokenized_attestation(CreateTokenizedAttestationParams(
        payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, schema=SCHEMA,
        attestation=ATTESTATION, schema_mint=key(10), attestation_mint=key(12), sas_pda=key(11),
        recipient=PAYER, recipient_token_account=key(13), nonce=key(9), data=b"", name="tName",
        uri="https://x", symbol="PAT", mint_account_space=600,
    ))
    assert len(ix.accounts) == 13
    assert ix.accounts[-1].address == ASSOCIATED_TOKEN_PROGRAM_ADDRESS
    reader = BinaryReader(ix.data)
    assert reader.u8() == 10
    reader.address()
    reader.blob()
    reader.i64()
    assert [reader.string(), reader.string(), reader.string()] == ["tName", "https://x", "PAT"]
    assert reader.u16() == 600
    assert reader.remaining == 0


def test_custom_program_address():
    builder = SasInstructionBuilder(str(key(42)))
    ix = builder.tokenize_schema(TokenizeSchemaParams(
        payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, schema=SCHEMA,
        schema_mint=key(10), sas_pda=key(11), max_size=1,
    ))
    assert ix.program_address == key(42)


def test_out_of_range_fields(builder):
    with pytest.raises(TransactionValidationError):
        builder.tokenize_schema(TokenizeSchemaParams(
            payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, schema=SCHEMA,
            schema_mint=key(10), sas_pda=key(11), max_size=-1,
        ))
    with pytest.raises(TransactionValidationError):
        builder.create_tokenized_attestation(CreateTokenizedAttestationParams(
            payer=PAYER, authority=AUTHORITY, credential=CREDENTIAL, schema=SCHEMA,
            attestation=ATTESTATION, schema_mint=key(10), attestation_mint=key(12), sas_pda=key(11),
            recipient=PAYER, recipient_token_account=key(13), nonce=key(9), data=b"", name="n",
            uri="u", symbol="S", mint_account_space=70000,
        ))
