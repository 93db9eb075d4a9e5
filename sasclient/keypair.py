"""
Ed25519 signing keys and Solana CLI keypair files.

A keypair file is a JSON array of 64 integers: the 32-byte private seed
followed by the 32-byte public key.
"""

import json
import logging
import os
from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from .address import Address
from .errors import KeypairLoadError

logger = logging.getLogger(__name__)

SEED_LENGTH = 32
SECRET_KEY_LENGTH = 64


@dataclass(frozen=True)
class Keypair:
    """Wraps an ed25519 key pair together with its account address."""
    private: Ed25519PrivateKey
    public: Ed25519PublicKey
    address: Address

    @classmethod
    def generate(cls) -> "Keypair":
        return cls._from_private(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "Keypair":
        if len(seed) != SEED_LENGTH:
            raise KeypairLoadError(f"seed must be {SEED_LENGTH} bytes, got {len(seed)}")
        return cls._from_private(Ed25519PrivateKey.from_private_bytes(bytes(seed)))

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "Keypair":
        """Build from the 64-byte seed||public layout, checking both halves agree."""
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise KeypairLoadError(
                f"secret key must be {SECRET_KEY_LENGTH} bytes, got {len(secret_key)}"
            )
        keypair = cls.from_seed(secret_key[:SEED_LENGTH])
        if bytes(keypair.address) != bytes(secret_key[SEED_LENGTH:]):
            raise KeypairLoadError("public key does not match private seed")
        return keypair

    @classmethod
    def _from_private(cls, private: Ed25519PrivateKey) -> "Keypair":
        public = private.public_key()
        public_bytes = public.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )
        return cls(private=private, public=public, address=Address(public_bytes))

    def seed_bytes(self) -> bytes:
        return self.private.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )

    def secret_key_bytes(self) -> bytes:
        return self.seed_bytes() + bytes(self.address)

    def sign(self, message: bytes) -> bytes:
        return self.private.sign(message)

    def __repr__(self) -> str:
        return f"Keypair(address={str(self.address)!r})"


def load_keypair_from_file(path: str) -> Keypair:
    """Load a Solana CLI keypair file."""
    resolved = os.path.expanduser(path)
    try:
        with open(resolved, 'r') as f:
            values = json.load(f)
    except OSError as e:
        raise KeypairLoadError(f"cannot read keypair file {resolved}: {e}")
    except json.JSONDecodeError as e:
        raise KeypairLoadError(f"keypair file {resolved} is not valid JSON: {e}")

    if not isinstance(values, list) or not all(isinstance(v, int) for v in values):
        raise KeypairLoadError(f"keypair file {resolved} must hold an array of integers")
    try:
        secret = bytes(values)
    except ValueError as e:
        raise KeypairLoadError(f"keypair file {resolved} holds non-byte values: {e}")

    keypair = Keypair.from_secret_key(secret)
    logger.debug(f"Loaded keypair {keypair.address} from {resolved}")
    return keypair


def write_keypair_file(keypair: Keypair, path: str) -> str:
    """Write a keypair in Solana CLI format, readable only by the owner."""
    resolved = os.path.expanduser(path)
    directory = os.path.dirname(resolved)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fd = os.open(resolved, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, 'w') as f:
        json.dump(list(keypair.secret_key_bytes()), f)
    return resolved
