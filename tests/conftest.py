import base64
from typing import Any, Dict, List, Optional, Tuple

import base58
import pytest

from sasclient.address import Address
from sasclient.constants import SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS
from sasclient.keypair import Keypair
from sasclient.rpc import JsonRpcTransport, RpcClient

BLOCKHASH = str(Address(bytes([7] * 32)))


class FakeNode(JsonRpcTransport):
    """In-memory JSON-RPC endpoint that accepts and confirms everything.

    Entries in `handlers` override a method with either a value or a callable
    taking the params list; a callable may raise to simulate failures.
    Accounts served by getAccountInfo live in `accounts` (base58 -> bytes).
    """

    def __init__(self):
        self.calls: List[Tuple[str, Any]] = []
        self.sent: List[bytes] = []
        self.accounts: Dict[str, bytes] = {}
        self.owners: Dict[str, Address] = {}
        self.closed = False
        self.handlers: Dict[str, Any] = {
            "getLatestBlockhash": {
                "context": {"slot": 1},
                "value": {"blockhash": BLOCKHASH, "lastValidBlockHeight": 500},
            },
            "sendTransaction": self._send,
            "getSignatureStatuses": {
                "context": {"slot": 2},
                "value": [{"slot": 2, "confirmations": 0, "err": None, "confirmationStatus": "confirmed"}],
            },
            "getBlockHeight": 100,
            "getAccountInfo": self._account,
        }

    async def request(self, method, params=None):
        self.calls.append((method, params))
        if method not in self.handlers:
            raise AssertionError(f"unexpected RPC call {method}")
        handler = self.handlers[method]
        if callable(handler):
            return handler(params)
        return handler

    async def close(self):
        self.closed = True

    def methods(self) -> List[str]:
        return [m for m, _ in self.calls]

    def put_account(self, key, data: bytes, owner: Optional[Address] = None) -> None:
        self.accounts[str(key)] = data
        if owner is not None:
            self.owners[str(key)] = owner

    def _send(self, params):
        wire = base64.b64decode(params[0])
        self.sent.append(wire)
        # first signature follows the one-byte signature count
        return base58.b58encode(wire[1:65]).decode("ascii")

    def _account(self, params):
        key = params[0]
        if key not in self.accounts:
            return {"context": {"slot": 1}, "value": None}
        owner = self.owners.get(key, SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS)
        return {
            "context": {"slot": 1},
            "value": {
                "lamports": 1_000_000,
                "owner": str(owner),
                "data": [base64.b64encode(self.accounts[key]).decode("ascii"), "base64"],
                "executable": False,
                "rentEpoch": 0,
            },
        }


@pytest.fixture
def payer():
    return Keypair.from_seed(bytes(range(32)))


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
def rpc(node):
    return RpcClient(node, max_retries=2, retry_backoff=0)
