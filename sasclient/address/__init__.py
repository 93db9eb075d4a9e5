"""
Package address provides 32-byte account keys and deterministic
program-derived address computation.
"""

from .pubkey import (
    PUBLIC_KEY_LENGTH,
    Address,
    AddressLike,
    address,
)
from .derivation import (
    MAX_SEEDS,
    MAX_SEED_LENGTH,
    PDA_MARKER,
    DerivedAddress,
    Seed,
    create_program_address,
    find_program_address,
    is_on_curve,
    normalize_seed,
)

__all__ = [
    'PUBLIC_KEY_LENGTH',
    'Address',
    'AddressLike',
    'address',
    'MAX_SEEDS',
    'MAX_SEED_LENGTH',
    'PDA_MARKER',
    'DerivedAddress',
    'Seed',
    'create_program_address',
    'find_program_address',
    'is_on_curve',
    'normalize_seed',
]
