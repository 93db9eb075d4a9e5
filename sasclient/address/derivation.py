"""
Program-derived address computation.

An address is derived by hashing the ordered seeds, a one-byte bump, the
program address and a fixed marker with SHA-256. The digest is only usable
when it does not decompress to an ed25519 point, so no private key can ever
sign for it. The bump search walks from 255 downwards and keeps the first
off-curve digest.
"""

import hashlib
import logging
from typing import List, NamedTuple, Sequence, Union

from .pubkey import Address, AddressLike, address
from ..errors import DerivationExhausted, InvalidSeedsError

logger = logging.getLogger(__name__)

MAX_SEEDS = 16
MAX_SEED_LENGTH = 32
PDA_MARKER = b"ProgramDerivedAddress"

# Curve25519 field prime and the twisted Edwards d constant
_P = 2 ** 255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P

Seed = Union[bytes, bytearray, str, Address]


class DerivedAddress(NamedTuple):
    """Result of a bump search: the off-curve address and the bump that produced it."""
    address: Address
    bump: int


def is_on_curve(point: bytes) -> bool:
    """Return True when the 32 bytes decompress to a point on the ed25519 curve.

    Mirrors compressed Edwards Y decompression: the sign bit is dropped, y is
    reduced mod p and the point exists iff (y^2 - 1) / (d*y^2 + 1) is a square.
    """
    if len(point) != 32:
        raise ValueError(f"curve point must be 32 bytes, got {len(point)}")
    y = (int.from_bytes(point, "little") & ((1 << 255) - 1)) % _P
    y2 = y * y % _P
    u = (y2 - 1) % _P
    v = (_D * y2 + 1) % _P
    x2 = u * pow(v, _P - 2, _P) % _P
    if x2 == 0:
        return True
    return pow(x2, (_P - 1) // 2, _P) == 1


def normalize_seed(seed: Seed) -> bytes:
    """Convert a seed component to the raw bytes that get hashed."""
    if isinstance(seed, Address):
        return bytes(seed)
    if isinstance(seed, str):
        return seed.encode("utf-8")
    if isinstance(seed, (bytes, bytearray, memoryview)):
        return bytes(seed)
    raise InvalidSeedsError(f"unsupported seed type: {type(seed).__name__}")


def _normalize_seeds(seeds: Sequence[Seed], max_count: int) -> List[bytes]:
    raw = [normalize_seed(s) for s in seeds]
    if len(raw) > max_count:
        raise InvalidSeedsError(f"too many seeds: {len(raw)} > {max_count}")
    for i, s in enumerate(raw):
        if len(s) > MAX_SEED_LENGTH:
            raise InvalidSeedsError(f"seed {i} is {len(s)} bytes, max is {MAX_SEED_LENGTH}")
    return raw


def _hash_seeds(program: Address, seeds: Sequence[bytes]) -> bytes:
    hasher = hashlib.sha256()
    for s in seeds:
        hasher.update(s)
    hasher.update(bytes(program))
    hasher.update(PDA_MARKER)
    return hasher.digest()


def create_program_address(program_address: AddressLike, seeds: Sequence[Seed]) -> Address:
    """Hash seeds (bump included) into a program address.

    Raises InvalidSeedsError when the limits are exceeded or the digest
    lands on the curve.
    """
    program = address(program_address)
    raw = _normalize_seeds(seeds, MAX_SEEDS)
    digest = _hash_seeds(program, raw)
    if is_on_curve(digest):
        raise InvalidSeedsError("invalid seeds, address must fall off the curve")
    return Address(digest)


def find_program_address(program_address: AddressLike, seeds: Sequence[Seed]) -> DerivedAddress:
    """Search bumps 255..0 for the first off-curve program address."""
    program = address(program_address)
    # one slot is reserved for the bump
    raw = _normalize_seeds(seeds, MAX_SEEDS - 1)

    for bump in range(255, -1, -1):
        digest = _hash_seeds(program, raw + [bytes([bump])])
        if not is_on_curve(digest):
            derived = DerivedAddress(Address(digest), bump)
            logger.debug(f"Derived {derived.address} (bump {bump}) under {program}")
            return derived

    logger.error(f"Bump search exhausted for program {program}")
    raise DerivationExhausted(str(program), len(raw))
