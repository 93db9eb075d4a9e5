"""
sasclient Python Package

Client for the Solana Attestation Service: program-derived addresses,
instruction building and transaction submission.
"""

__version__ = "0.1.0"

from .address import Address, DerivedAddress, find_program_address
from .config import ClientConfig
from .constants import (
    ASSOCIATED_TOKEN_PROGRAM_ADDRESS,
    SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS,
    SYSTEM_PROGRAM_ADDRESS,
    TOKEN_2022_PROGRAM_ADDRESS,
)
from .errors import (
    DerivationExhausted,
    NetworkUnavailable,
    SasError,
    SchemaFetchFailed,
    SubmissionRejected,
    TransactionValidationError,
)
from .keypair import Keypair, load_keypair_from_file
from .transaction import SubmitResult, TransactionAssembler, submit
from .service import AttestationService, create_service

from . import program

__all__ = [
    "Address",
    "DerivedAddress",
    "find_program_address",
    "ClientConfig",
    "ASSOCIATED_TOKEN_PROGRAM_ADDRESS",
    "SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS",
    "SYSTEM_PROGRAM_ADDRESS",
    "TOKEN_2022_PROGRAM_ADDRESS",
    "DerivationExhausted",
    "NetworkUnavailable",
    "SasError",
    "SchemaFetchFailed",
    "SubmissionRejected",
    "TransactionValidationError",
    "Keypair",
    "load_keypair_from_file",
    "SubmitResult",
    "TransactionAssembler",
    "submit",
    "AttestationService",
    "create_service",
    "program",
]
