"""
Value types returned by the RPC client.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..address import Address


class Commitment(str, Enum):
    """Confirmation depth, ordered from weakest to strongest."""
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @property
    def rank(self) -> int:
        return _COMMITMENT_RANK[self]

    def satisfied_by(self, status: Optional[str]) -> bool:
        """True when a reported confirmation status reaches this level."""
        if status is None:
            return False
        try:
            return Commitment(status).rank >= self.rank
        except ValueError:
            return False


_COMMITMENT_RANK = {
    Commitment.PROCESSED: 0,
    Commitment.CONFIRMED: 1,
    Commitment.FINALIZED: 2,
}


@dataclass(frozen=True)
class LatestBlockhash:
    """Freshness anchor for a transaction."""
    blockhash: str
    last_valid_block_height: int


@dataclass(frozen=True)
class AccountInfo:
    lamports: int
    owner: Address
    data: bytes
    executable: bool = False
    rent_epoch: Optional[int] = None


@dataclass(frozen=True)
class SignatureStatus:
    slot: int
    confirmation_status: Optional[str]
    err: Optional[Any] = None
    confirmations: Optional[int] = None

    @classmethod
    def from_rpc(cls, value: Dict[str, Any]) -> "SignatureStatus":
        return cls(
            slot=value.get("slot", 0),
            confirmation_status=value.get("confirmationStatus"),
            err=value.get("err"),
            confirmations=value.get("confirmations"),
        )
