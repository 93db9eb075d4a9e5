"""
Outcome of a transaction submission.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import SasError


class SubmitStatus(Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class SubmitResult:
    """Success or failure of one submission.

    A failed result keeps the typed error; `unwrap()` re-raises it so
    callers that prefer exceptions can opt back in.
    """
    status: SubmitStatus
    signature: Optional[str] = None
    explorer_url: Optional[str] = None
    slot: Optional[int] = None
    error: Optional[SasError] = None

    @classmethod
    def success(cls, signature: str, explorer_url: Optional[str] = None,
                slot: Optional[int] = None) -> "SubmitResult":
        return cls(SubmitStatus.CONFIRMED, signature=signature, explorer_url=explorer_url, slot=slot)

    @classmethod
    def failure(cls, error: SasError, signature: Optional[str] = None) -> "SubmitResult":
        return cls(SubmitStatus.FAILED, signature=signature, error=error)

    @property
    def ok(self) -> bool:
        return self.status is SubmitStatus.CONFIRMED

    def unwrap(self) -> str:
        """Return the signature or raise the recorded error."""
        if self.ok:
            return self.signature
        raise self.error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "signature": self.signature,
            "explorer_url": self.explorer_url,
            "slot": self.slot,
            "error": str(self.error) if self.error else None,
            "error_type": type(self.error).__name__ if self.error else None,
        }
