"""
JSON-RPC transports.

The client talks to the network only through a JsonRpcTransport so tests can
swap in an in-memory fake. HttpxTransport is the default HTTP implementation.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx

from ..errors import NetworkUnavailable, RpcError

logger = logging.getLogger(__name__)


class JsonRpcTransport(ABC):
    """Abstract interface for sending one JSON-RPC request."""

    @abstractmethod
    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Send a request and return its `result` member.

        Raises:
            NetworkUnavailable: the endpoint could not be reached or replied garbage
            RpcError: the endpoint replied with a JSON-RPC error object
        """
        pass

    async def close(self) -> None:
        pass


class HttpxTransport(JsonRpcTransport):
    """JSON-RPC 2.0 over HTTP POST using an httpx.AsyncClient."""

    def __init__(self, url: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._ids = itertools.count(1)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def request(self, method: str, params: Optional[List[Any]] = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        client = self._get_client()
        try:
            response = await client.post(self.url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise NetworkUnavailable(f"{method}: HTTP {e.response.status_code} from {self.url}")
        except httpx.HTTPError as e:
            raise NetworkUnavailable(f"{method}: {type(e).__name__}: {e}")
        except ValueError as e:
            raise NetworkUnavailable(f"{method}: invalid JSON response: {e}")

        if not isinstance(body, dict):
            raise NetworkUnavailable(f"{method}: unexpected response shape")
        if body.get("error"):
            err = body["error"]
            if not isinstance(err, dict):
                raise NetworkUnavailable(f"{method}: malformed error object {err!r}")
            raise RpcError(err.get("code", 0), err.get("message", "unknown error"), err.get("data"))
        if "result" not in body:
            raise NetworkUnavailable(f"{method}: response has neither result nor error")
        return body["result"]

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
