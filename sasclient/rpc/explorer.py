"""
Cluster monikers and block explorer links.
"""

from typing import Optional
from urllib.parse import urlencode

EXPLORER_BASE_URL = "https://explorer.solana.com"

CLUSTER_URLS = {
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "localnet": "http://127.0.0.1:8899",
}


def resolve_endpoint(url_or_moniker: str) -> str:
    """Map a cluster moniker to its public RPC URL; URLs pass through."""
    return CLUSTER_URLS.get(url_or_moniker, url_or_moniker)


def cluster_for(url_or_moniker: str) -> Optional[str]:
    """Best-effort cluster name for an endpoint, None for custom URLs."""
    if url_or_moniker in CLUSTER_URLS:
        return "mainnet" if url_or_moniker == "mainnet-beta" else url_or_moniker
    for name, url in CLUSTER_URLS.items():
        if url == url_or_moniker:
            return "mainnet" if name == "mainnet-beta" else name
    return None


def get_explorer_link(
    transaction: Optional[str] = None,
    address: Optional[str] = None,
    cluster: Optional[str] = "devnet",
    custom_url: Optional[str] = None,
) -> str:
    """Explorer URL for a transaction signature or an account address."""
    if transaction:
        path = f"/tx/{transaction}"
    elif address:
        path = f"/address/{address}"
    else:
        raise ValueError("transaction or address is required")

    if cluster in (None, "mainnet", "mainnet-beta") and not custom_url:
        return f"{EXPLORER_BASE_URL}{path}"
    if cluster == "localnet" or custom_url:
        query = urlencode({"cluster": "custom", "customUrl": custom_url or CLUSTER_URLS["localnet"]})
    else:
        query = urlencode({"cluster": cluster})
    return f"{EXPLORER_BASE_URL}{path}?{query}"
