"""
Well-known program addresses used by the attestation flows.
"""

from .address import Address

SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS = Address.from_string(
    "22zoJMtdu4tQc2PzL74ZUT7FrwgB1Udec8DdW4yw4BdG"
)
SYSTEM_PROGRAM_ADDRESS = Address.from_string("11111111111111111111111111111111")
TOKEN_2022_PROGRAM_ADDRESS = Address.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
ASSOCIATED_TOKEN_PROGRAM_ADDRESS = Address.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")

__all__ = [
    "SOLANA_ATTESTATION_SERVICE_PROGRAM_ADDRESS",
    "SYSTEM_PROGRAM_ADDRESS",
    "TOKEN_2022_PROGRAM_ADDRESS",
    "ASSOCIATED_TOKEN_PROGRAM_ADDRESS",
]
