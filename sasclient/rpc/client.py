"""
Async Solana JSON-RPC client.

Only the handful of calls the attestation flows need are wrapped. Transient
transport failures are retried with exponential backoff; node-side rejections
are not.
"""

import asyncio
import base64
import logging
import time
from typing import TYPE_CHECKING, Any, List, Optional

from .transport import HttpxTransport, JsonRpcTransport
from .types import AccountInfo, Commitment, LatestBlockhash, SignatureStatus
from ..address import Address, AddressLike, address
from ..errors import ConfirmationTimeout, NetworkUnavailable, RpcError, SubmissionRejected
from ..monitoring import get_registry

if TYPE_CHECKING:  # pragma: no cover
    from ..config import ClientConfig

logger = logging.getLogger(__name__)


def _unexpected_shape(method: str) -> NetworkUnavailable:
    return NetworkUnavailable(f"{method}: unexpected result shape")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class RpcClient:
    """Thin typed wrapper over a JsonRpcTransport."""

    def __init__(
        self,
        transport: JsonRpcTransport,
        commitment: Commitment = Commitment.CONFIRMED,
        max_retries: int = 3,
        retry_backoff: float = 0.5,
    ):
        self.transport = transport
        self.commitment = commitment
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff

    @classmethod
    def from_config(cls, config: "ClientConfig") -> "RpcClient":
        transport = HttpxTransport(config.endpoint, timeout=config.request_timeout)
        return cls(
            transport,
            commitment=config.commitment,
            max_retries=config.max_retries,
            retry_backoff=config.retry_backoff,
        )

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    async def _call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        attempt = 0
        while True:
            try:
                logger.debug(f"RPC {method} (attempt {attempt + 1})")
                return await self.transport.request(method, params)
            except NetworkUnavailable as e:
                self._observe_error(method, "network")
                if attempt >= self.max_retries:
                    logger.error(f"RPC {method} failed after {attempt + 1} attempts: {e}")
                    raise
                delay = self.retry_backoff * (2 ** attempt)
                logger.warning(f"RPC {method} failed ({e}); retrying in {delay:.2f}s")
                attempt += 1
                await asyncio.sleep(delay)
            except RpcError:
                self._observe_error(method, "rpc")
                raise

    def _observe_error(self, method: str, kind: str) -> None:
        get_registry().observe_rpc_error(method, kind)

    def _commitment(self, commitment: Optional[Commitment]) -> str:
        return (commitment or self.commitment).value

    async def get_latest_blockhash(self, commitment: Optional[Commitment] = None) -> LatestBlockhash:
        try:
            result = await self._call("getLatestBlockhash", [{"commitment": self._commitment(commitment)}])
        except RpcError as e:
            raise NetworkUnavailable(f"getLatestBlockhash: {e}")
        value = result.get("value") if isinstance(result, dict) else None
        if not isinstance(value, dict) or not _is_int(value.get("lastValidBlockHeight")):
            raise _unexpected_shape("getLatestBlockhash")
        try:
            Address.from_string(value.get("blockhash"))
        except (TypeError, ValueError):
            raise _unexpected_shape("getLatestBlockhash")
        return LatestBlockhash(
            blockhash=value["blockhash"],
            last_valid_block_height=value["lastValidBlockHeight"],
        )

    async def get_block_height(self, commitment: Optional[Commitment] = None) -> int:
        try:
            height = await self._call("getBlockHeight", [{"commitment": self._commitment(commitment)}])
        except RpcError as e:
            raise NetworkUnavailable(f"getBlockHeight: {e}")
        if not _is_int(height):
            raise _unexpected_shape("getBlockHeight")
        return height

    async def get_account_info(self, account: AddressLike,
                               commitment: Optional[Commitment] = None) -> Optional[AccountInfo]:
        """Fetch an account, or None when it does not exist."""
        key = address(account)
        try:
            result = await self._call("getAccountInfo", [
                str(key),
                {"encoding": "base64", "commitment": self._commitment(commitment)},
            ])
        except RpcError as e:
            raise NetworkUnavailable(f"getAccountInfo {key}: {e}")
        if not isinstance(result, dict):
            raise _unexpected_shape("getAccountInfo")
        value = result.get("value")
        if value is None:
            return None
        try:
            data_field = value.get("data") or ["", "base64"]
            return AccountInfo(
                lamports=value.get("lamports", 0),
                owner=Address.from_string(value["owner"]),
                data=base64.b64decode(data_field[0]),
                executable=value.get("executable", False),
                rent_epoch=value.get("rentEpoch"),
            )
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise NetworkUnavailable(f"getAccountInfo {key}: unexpected result shape ({e})")

    async def send_transaction(
        self,
        wire_transaction: bytes,
        skip_preflight: bool = True,
        preflight_commitment: Optional[Commitment] = None,
    ) -> str:
        """Submit serialized transaction bytes and return the signature the node reports."""
        options = {
            "encoding": "base64",
            "skipPreflight": skip_preflight,
            "preflightCommitment": self._commitment(preflight_commitment),
        }
        encoded = base64.b64encode(wire_transaction).decode("ascii")
        try:
            signature = await self._call("sendTransaction", [encoded, options])
        except RpcError as e:
            raise SubmissionRejected(f"sendTransaction rejected: {e.message} (code {e.code})")
        if not isinstance(signature, str):
            raise _unexpected_shape("sendTransaction")
        return signature

    async def get_signature_status(self, signature: str) -> Optional[SignatureStatus]:
        try:
            result = await self._call("getSignatureStatuses", [[signature], {"searchTransactionHistory": False}])
        except RpcError as e:
            raise NetworkUnavailable(f"getSignatureStatuses: {e}")
        values = result.get("value") if isinstance(result, dict) else None
        if not isinstance(values, list):
            raise _unexpected_shape("getSignatureStatuses")
        entry = values[0] if values else None
        if entry is None:
            return None
        if not isinstance(entry, dict):
            raise _unexpected_shape("getSignatureStatuses")
        return SignatureStatus.from_rpc(entry)

    async def confirm_transaction(
        self,
        signature: str,
        last_valid_block_height: Optional[int] = None,
        commitment: Optional[Commitment] = None,
        timeout: float = 60.0,
        poll_interval: float = 0.5,
    ) -> SignatureStatus:
        """Poll until the signature reaches `commitment`.

        Raises:
            SubmissionRejected: the transaction executed with an error
            ConfirmationTimeout: timeout elapsed or the blockhash expired first
        """
        target = commitment or self.commitment
        started = time.monotonic()

        async def _poll() -> SignatureStatus:
            while True:
                status = await self.get_signature_status(signature)
                if status is not None:
                    if status.err is not None:
                        raise SubmissionRejected(
                            f"transaction failed on-chain: {status.err}", signature=signature
                        )
                    if target.satisfied_by(status.confirmation_status):
                        return status
                elif last_valid_block_height is not None:
                    height = await self.get_block_height()
                    if height > last_valid_block_height:
                        raise ConfirmationTimeout(
                            f"blockhash expired at height {last_valid_block_height} "
                            f"before {signature} landed",
                            signature=signature,
                        )
                await asyncio.sleep(poll_interval)

        try:
            status = await asyncio.wait_for(_poll(), timeout=timeout)
        except asyncio.TimeoutError:
            raise ConfirmationTimeout(
                f"{signature} not {target.value} within {timeout:.1f}s", signature=signature
            )
        get_registry().observe_confirmation(time.monotonic() - started)
        return status
