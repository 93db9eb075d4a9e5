"""
Transaction assembly and submission.

Each submit call fetches a fresh blockhash, compiles and signs a new legacy
message, sends it and waits for the configured commitment. Network and
rejection failures come back as a failed SubmitResult; malformed input
(no instructions, missing signer) raises before any network call.
"""

import logging
from typing import Optional, Sequence, Tuple

from .message import Instruction, compile_message
from .result import SubmitResult
from .transaction import Transaction, sign_message
from ..config import ClientConfig
from ..errors import NetworkUnavailable, SubmissionRejected, TransactionValidationError
from ..keypair import Keypair
from ..monitoring import get_registry
from ..rpc.client import RpcClient
from ..rpc.explorer import get_explorer_link
from ..rpc.types import Commitment, LatestBlockhash

logger = logging.getLogger(__name__)


class TransactionAssembler:
    """Builds, signs and submits transactions through an RpcClient."""

    def __init__(
        self,
        rpc: RpcClient,
        commitment: Commitment = Commitment.CONFIRMED,
        skip_preflight: bool = True,
        confirm_timeout: float = 60.0,
        poll_interval: float = 0.5,
        cluster: Optional[str] = "devnet",
        custom_url: Optional[str] = None,
    ):
        self.rpc = rpc
        self.commitment = commitment
        self.skip_preflight = skip_preflight
        self.confirm_timeout = confirm_timeout
        self.poll_interval = poll_interval
        self.cluster = cluster
        # explorer target for endpoints that map to no public cluster
        self.custom_url = custom_url

    @classmethod
    def from_config(cls, config: ClientConfig, rpc: Optional[RpcClient] = None) -> "TransactionAssembler":
        return cls(
            rpc or RpcClient.from_config(config),
            commitment=config.commitment,
            skip_preflight=config.skip_preflight,
            confirm_timeout=config.confirm_timeout,
            poll_interval=config.poll_interval,
            cluster=config.cluster,
            custom_url=config.endpoint if config.cluster is None else None,
        )

    async def build(
        self,
        signer: Keypair,
        instructions: Sequence[Instruction],
        extra_signers: Sequence[Keypair] = (),
    ) -> Tuple[Transaction, LatestBlockhash]:
        """Fetch a blockhash and return the signed transaction.

        Raises:
            TransactionValidationError: no instructions or a required signer is missing
            NetworkUnavailable: the blockhash could not be fetched
        """
        if not instructions:
            raise TransactionValidationError("transaction must contain at least one instruction")
        available = {kp.address for kp in (signer, *extra_signers)}
        missing = sorted({
            str(meta.address)
            for ix in instructions
            for meta in ix.accounts
            if meta.is_signer and meta.address not in available
        })
        if missing:
            raise TransactionValidationError(f"missing signer for {', '.join(missing)}")

        anchor = await self.rpc.get_latest_blockhash(self.commitment)
        message = compile_message(signer.address, list(instructions), anchor.blockhash)
        transaction = sign_message(message, [signer, *extra_signers])
        return transaction, anchor

    async def submit(
        self,
        signer: Keypair,
        instructions: Sequence[Instruction],
        extra_signers: Sequence[Keypair] = (),
    ) -> SubmitResult:
        """Send `instructions` paid for and signed by `signer`."""
        transaction, anchor = None, None
        try:
            transaction, anchor = await self.build(signer, instructions, extra_signers)
            signature = transaction.signature
            logger.debug(f"Sending {signature} ({len(instructions)} instructions)")

            reported = await self.rpc.send_transaction(
                transaction.serialize(),
                skip_preflight=self.skip_preflight,
                preflight_commitment=self.commitment,
            )
            if reported != signature:
                logger.warning(f"Node reported signature {reported}, expected {signature}")

            status = await self.rpc.confirm_transaction(
                signature,
                last_valid_block_height=anchor.last_valid_block_height,
                commitment=self.commitment,
                timeout=self.confirm_timeout,
                poll_interval=self.poll_interval,
            )
        except (NetworkUnavailable, SubmissionRejected) as e:
            signature = transaction.signature if transaction else None
            logger.error(f"Unable to send and confirm the transaction: {e}")
            get_registry().observe_submission("failed")
            return SubmitResult.failure(e, signature=signature)

        link = get_explorer_link(transaction=signature, cluster=self.cluster, custom_url=self.custom_url)
        logger.info(f"Transaction confirmed: {signature}")
        logger.info(f"Explorer link: {link}")
        get_registry().observe_submission("confirmed")
        return SubmitResult.success(signature, explorer_url=link, slot=status.slot)


async def submit(
    signer: Keypair,
    instructions: Sequence[Instruction],
    endpoint: str,
    extra_signers: Sequence[Keypair] = (),
    **options,
) -> SubmitResult:
    """One-shot submission against `endpoint` (URL or cluster moniker).

    Keyword options are forwarded to ClientConfig.
    """
    config = ClientConfig(rpc_url=endpoint, **options)
    async with RpcClient.from_config(config) as rpc:
        assembler = TransactionAssembler.from_config(config, rpc=rpc)
        return await assembler.submit(signer, instructions, extra_signers)
