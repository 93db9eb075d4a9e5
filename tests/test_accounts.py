import pytest

from sasclient.address import Address
from sasclient.errors import AccountDecodeError, NetworkUnavailable, SchemaFetchFailed
from sasclient.program.accounts import (
    Attestation,
    Credential,
    Schema,
    fetch_attestation,
    fetch_credential,
    fetch_schema,
)
from sasclient.program.layout import serialize_attestation_data

SCHEMA_KEY = Address(bytes([11] * 32))


def make_schema():
    return Schema(
        credential=Address(bytes([1] * 32)),
        name="test28",
        description="test desc",
        layout=bytes([12, 12, 12]),
        field_names=["name", "age", "country"],
    )


def test_credential_layout():
    credential = Credential(
        authority=Address(bytes([1] * 32)),
        name="test28",
        authorized_signers=[Address(bytes([2] * 32)), Address(bytes([3] * 32))],
    )
    data = credential.encode()
    assert data[0] == 0
    assert data[1:33] == bytes([1] * 32)
    assert data[33:43] == b"\x06\x00\x00\x00test28"
    assert data[43:47] == b"\x02\x00\x00\x00"
    assert Credential.decode(data) == credential


def test_schema_decode():
    schema = make_schema()
    decoded = Schema.decode(schema.encode())
    assert decoded == schema
    assert decoded.is_paused is False
    assert decoded.version == 1


def test_attestation_decoded_data():
    schema = make_schema()
    data = serialize_attestation_data(schema, {"name": "john", "age": "11", "country": "spain"})
    attestation = Attestation(
        nonce=Address(bytes([4] * 32)),
        credential=schema.credential,
        schema=SCHEMA_KEY,
        data=data,
        signer=Address(bytes([5] * 32)),
        expiry=0,
        token_account=Address(bytes(32)),
    )
    decoded = Attestation.decode(attestation.encode())
    assert decoded == attestation
    assert decoded.decoded_data(schema)["country"] == "spain"


def test_decode_wrong_discriminator():
    with pytest.raises(AccountDecodeError):
        Schema.decode(Credential(Address(bytes(32)), "x").encode())
    with pytest.raises(AccountDecodeError):
        Credential.decode(b"")


def test_decode_truncated():
    data = make_schema().encode()
    with pytest.raises(AccountDecodeError):
        Schema.decode(data[:-1])


@pytest.mark.asyncio
async def test_fetch_schema(node, rpc):
    node.put_account(SCHEMA_KEY, make_schema().encode())
    schema = await fetch_schema(rpc, SCHEMA_KEY)
    assert schema.field_names == ["name", "age", "country"]
    method, params = node.calls[0]
    assert method == "getAccountInfo"
    assert params[0] == str(SCHEMA_KEY)
    assert params[1]["encoding"] == "base64"


@pytest.mark.asyncio
async def test_fetch_schema_missing(rpc):
    with pytest.raises(SchemaFetchFailed, match="does not exist"):
        await fetch_schema(rpc, SCHEMA_KEY)


@pytest.mark.asyncio
async def test_fetch_schema_garbage(node, rpc):
    node.put_account(SCHEMA_KEY, b"\x01\x02")
    with pytest.raises(SchemaFetchFailed):
        await fetch_schema(rpc, SCHEMA_KEY)


@pytest.mark.asyncio
async def test_fetch_schema_wrong_owner(node, rpc):
    node.put_account(SCHEMA_KEY, make_schema().encode(), owner=Address(bytes([9] * 32)))
    with pytest.raises(SchemaFetchFailed, match="owned by"):
        await fetch_schema(rpc, SCHEMA_KEY)


@pytest.mark.asyncio
async def test_fetch_schema_network_down(node, rpc):
    def down(params):
        raise NetworkUnavailable("connection refused")

    node.handlers["getAccountInfo"] = down
    with pytest.raises(SchemaFetchFailed):
        await fetch_schema(rpc, SCHEMA_KEY)
    # initial attempt plus two retries
    assert node.methods().count("getAccountInfo") == 3


@pytest.mark.asyncio
async def test_fetch_missing_credential_and_attestation(rpc):
    assert await fetch_credential(rpc, SCHEMA_KEY) is None
    assert await fetch_attestation(rpc, SCHEMA_KEY) is None


@pytest.mark.asyncio
async def test_fetch_credential(node, rpc):
    credential = Credential(Address(bytes([1] * 32)), "test28")
    node.put_account(SCHEMA_KEY, credential.encode())
    assert await fetch_credential(rpc, SCHEMA_KEY) == credential
