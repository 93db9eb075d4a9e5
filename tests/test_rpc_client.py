import json

import httpx
import pytest

from sasclient.address import Address
from sasclient.errors import NetworkUnavailable, RpcError, SubmissionRejected
from sasclient.rpc import (
    Commitment,
    HttpxTransport,
    RpcClient,
    cluster_for,
    get_explorer_link,
    resolve_endpoint,
)

URL = "http://rpc.test"


def mock_transport(handler):
    """HttpxTransport whose requests are answered by `handler(payload) -> httpx.Response`."""
    seen = []

    def respond(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        seen.append(payload)
        return handler(payload)

    client = httpx.AsyncClient(transport=httpx.MockTransport(respond))
    return HttpxTransport(URL, client=client), seen


def ok(payload, result):
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})


@pytest.mark.asyncio
async def test_request_envelope():
    transport, seen = mock_transport(lambda p: ok(p, 42))
    rpc = RpcClient(transport)
    assert await rpc.get_block_height() == 42
    assert seen[0]["jsonrpc"] == "2.0"
    assert seen[0]["method"] == "getBlockHeight"
    assert seen[0]["params"] == [{"commitment": "confirmed"}]
    await transport.close()


@pytest.mark.asyncio
async def test_latest_blockhash():
    blockhash = str(Address(bytes([7] * 32)))
    transport, _ = mock_transport(lambda p: ok(p, {
        "context": {"slot": 1},
        "value": {"blockhash": blockhash, "lastValidBlockHeight": 77},
    }))
    anchor = await RpcClient(transport).get_latest_blockhash(Commitment.FINALIZED)
    assert anchor.blockhash == blockhash
    assert anchor.last_valid_block_height == 77


@pytest.mark.asyncio
async def test_rpc_error_object():
    def handler(p):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": p["id"], "error": {"code": -32602, "message": "bad params"}})

    transport, _ = mock_transport(handler)
    with pytest.raises(RpcError) as exc:
        await transport.request("getBlockHeight")
    assert exc.value.code == -32602

    with pytest.raises(SubmissionRejected, match="bad params"):
        await RpcClient(transport).send_transaction(b"\x00")


@pytest.mark.asyncio
async def test_http_error_is_network_unavailable():
    transport, seen = mock_transport(lambda p: httpx.Response(503, text="unavailable"))
    rpc = RpcClient(transport, max_retries=1, retry_backoff=0)
    with pytest.raises(NetworkUnavailable):
        await rpc.get_block_height()
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_invalid_json_is_network_unavailable():
    transport, _ = mock_transport(lambda p: httpx.Response(200, text="<html>"))
    with pytest.raises(NetworkUnavailable):
        await transport.request("getBlockHeight")


@pytest.mark.asyncio
async def test_connection_error_is_network_unavailable():
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse))
    transport = HttpxTransport(URL, client=client)
    with pytest.raises(NetworkUnavailable):
        await transport.request("getBlockHeight")


@pytest.mark.asyncio
async def test_account_info_missing(node, rpc):
    assert await rpc.get_account_info(Address(bytes(32))) is None


@pytest.mark.asyncio
async def test_client_context_closes_transport(node):
    async with RpcClient(node) as rpc:
        await rpc.get_block_height()
    assert node.closed


@pytest.mark.asyncio
async def test_signature_status(node, rpc):
    status = await rpc.get_signature_status("sig")
    assert status.slot == 2
    assert status.confirmation_status == "confirmed"
    assert node.calls[0][1] == [["sig"], {"searchTransactionHistory": False}]


def test_commitment_ordering():
    assert Commitment.CONFIRMED.satisfied_by("finalized")
    assert Commitment.CONFIRMED.satisfied_by("confirmed")
    assert not Commitment.CONFIRMED.satisfied_by("processed")
    assert not Commitment.PROCESSED.satisfied_by(None)
    assert not Commitment.PROCESSED.satisfied_by("bogus")


def test_cluster_resolution():
    assert resolve_endpoint("devnet") == "https://api.devnet.solana.com"
    assert resolve_endpoint("http://localhost:8899") == "http://localhost:8899"
    assert cluster_for("https://api.devnet.solana.com") == "devnet"
    assert cluster_for("mainnet-beta") == "mainnet"
    assert cluster_for("http://my.node") is None


def test_explorer_links():
    assert get_explorer_link(transaction="abc") == "https://explorer.solana.com/tx/abc?cluster=devnet"
    assert get_explorer_link(address="xyz", cluster="mainnet") == "https://explorer.solana.com/address/xyz"
    assert get_explorer_link(transaction="abc", cluster="localnet") == (
        "https://explorer.solana.com/tx/abc?cluster=custom&customUrl=http%3A%2F%2F127.0.0.1%3A8899"
    )
    with pytest.raises(ValueError):
        get_explorer_link()


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [
    {"lamports": 1, "data": ["", "base64"]},
    {"lamports": 1, "owner": "11111111111111111111111111111111", "data": ["abc", "base64"]},
    "gone",
])
async def test_account_info_malformed(node, rpc, value):
    node.handlers["getAccountInfo"] = {"context": {"slot": 1}, "value": value}
    with pytest.raises(NetworkUnavailable, match="unexpected result shape"):
        await rpc.get_account_info(Address(bytes(32)))


@pytest.mark.asyncio
async def test_block_height_must_be_integer(node, rpc):
    node.handlers["getBlockHeight"] = {"height": 5}
    with pytest.raises(NetworkUnavailable, match="unexpected result shape"):
        await rpc.get_block_height()


@pytest.mark.asyncio
async def test_malformed_error_object():
    transport, _ = mock_transport(
        lambda p: httpx.Response(200, json={"jsonrpc": "2.0", "id": p["id"], "error": "boom"})
    )
    with pytest.raises(NetworkUnavailable, match="malformed error object"):
        await transport.request("getBlockHeight")
