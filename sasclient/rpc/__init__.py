"""
Package rpc provides the JSON-RPC transport, a typed async client for the
calls the attestation flows use, and explorer/cluster helpers.
"""

from .types import (
    AccountInfo,
    Commitment,
    LatestBlockhash,
    SignatureStatus,
)
from .transport import HttpxTransport, JsonRpcTransport
from .client import RpcClient
from .explorer import (
    CLUSTER_URLS,
    cluster_for,
    get_explorer_link,
    resolve_endpoint,
)

__all__ = [
    'AccountInfo',
    'Commitment',
    'LatestBlockhash',
    'SignatureStatus',
    'HttpxTransport',
    'JsonRpcTransport',
    'RpcClient',
    'CLUSTER_URLS',
    'cluster_for',
    'get_explorer_link',
    'resolve_endpoint',
]
