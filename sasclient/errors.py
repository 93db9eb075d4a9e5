"""
Exception hierarchy for sasclient.

Derivation, validation and key-load failures are raised to the caller.
Network and submission failures are raised inside the RPC layer and folded
into a SubmitResult by the transaction assembler.
"""

from typing import Any, Optional


class SasError(Exception):
    """Base class for all sasclient errors."""


class InvalidSeedsError(SasError, ValueError):
    """Seeds violate the derivation limits or hash onto the curve."""


class DerivationExhausted(SasError):
    """No bump value produced an off-curve program address."""

    def __init__(self, program_address: str, seed_count: int):
        super().__init__(
            f"unable to find a viable program address bump for {program_address} "
            f"({seed_count} seeds)"
        )
        self.program_address = program_address
        self.seed_count = seed_count


class KeypairLoadError(SasError):
    """Key material could not be read or is malformed."""


class TransactionValidationError(SasError, ValueError):
    """A transaction could not be assembled from the given inputs."""


class AttestationDataError(SasError, ValueError):
    """Attestation values do not match the schema layout."""


class AccountDecodeError(SasError, ValueError):
    """Raw account data does not match the expected account layout."""


class RpcError(SasError):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data


class NetworkUnavailable(SasError):
    """The RPC endpoint could not be reached or returned garbage."""


class SubmissionRejected(SasError):
    """The network rejected the transaction or it failed on-chain."""

    def __init__(self, reason: str, signature: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.signature = signature


class ConfirmationTimeout(SubmissionRejected):
    """The transaction did not reach the requested commitment in time."""


class SchemaFetchFailed(SasError):
    """A schema account required by an attestation could not be loaded."""


__all__ = [
    "SasError",
    "InvalidSeedsError",
    "DerivationExhausted",
    "KeypairLoadError",
    "TransactionValidationError",
    "AttestationDataError",
    "AccountDecodeError",
    "RpcError",
    "NetworkUnavailable",
    "SubmissionRejected",
    "ConfirmationTimeout",
    "SchemaFetchFailed",
]
