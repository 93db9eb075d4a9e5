"""
Signed transaction envelopes.
"""

import base64
from dataclasses import dataclass
from typing import Sequence, Tuple

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from .message import PACKET_DATA_SIZE, Message, encode_compact_u16
from ..errors import TransactionValidationError
from ..keypair import Keypair


@dataclass(frozen=True)
class Transaction:
    """A message plus one signature per required signer, in key order."""
    message: Message
    signatures: Tuple[bytes, ...]

    @property
    def signature(self) -> str:
        """Base58 fee-payer signature, which doubles as the transaction id."""
        return base58.b58encode(self.signatures[0]).decode("ascii")

    def serialize(self) -> bytes:
        out = bytearray(encode_compact_u16(len(self.signatures)))
        for sig in self.signatures:
            out += sig
        out += self.message.serialize()
        return bytes(out)

    def to_base64(self) -> str:
        return base64.b64encode(self.serialize()).decode("ascii")

    def verify_signatures(self) -> bool:
        """Check every signature against its signer key."""
        payload = self.message.serialize()
        for key, sig in zip(self.message.signer_keys, self.signatures):
            try:
                Ed25519PublicKey.from_public_bytes(bytes(key)).verify(sig, payload)
            except InvalidSignature:
                return False
        return True


def sign_message(message: Message, signers: Sequence[Keypair]) -> Transaction:
    """Sign `message` with every required signer; extra keypairs are ignored."""
    by_address = {kp.address: kp for kp in signers}
    payload = message.serialize()

    signatures = []
    for key in message.signer_keys:
        keypair = by_address.get(key)
        if keypair is None:
            raise TransactionValidationError(f"missing signer for {key}")
        signatures.append(keypair.sign(payload))

    transaction = Transaction(message=message, signatures=tuple(signatures))
    size = len(transaction.serialize())
    if size > PACKET_DATA_SIZE:
        raise TransactionValidationError(
            f"transaction too large: {size} bytes > {PACKET_DATA_SIZE}"
        )
    return transaction
