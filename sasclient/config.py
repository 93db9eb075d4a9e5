"""
Client configuration.

Values default to devnet and the Solana CLI keypair location; every field
can be overridden from `SAS_*` environment variables.
"""

import os
from dataclasses import dataclass, field, fields
from typing import Mapping, Optional

from .rpc.explorer import cluster_for, resolve_endpoint
from .rpc.types import Commitment

DEFAULT_KEYPAIR_PATH = "~/.config/solana/id.json"
ENV_PREFIX = "SAS_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name}: expected a boolean, got {raw!r}")


@dataclass
class ClientConfig:
    """Configuration for RPC access, signing and submission behavior."""
    rpc_url: str = "devnet"
    keypair_path: str = DEFAULT_KEYPAIR_PATH
    commitment: Commitment = Commitment.CONFIRMED
    skip_preflight: bool = True

    # Confirmation waiting
    confirm_timeout: float = 60.0
    poll_interval: float = 0.5

    # Transient RPC failures
    max_retries: int = 3
    retry_backoff: float = 0.5
    request_timeout: float = 30.0

    program_address: Optional[str] = None
    explorer_cluster: Optional[str] = field(default=None)

    def __post_init__(self):
        if isinstance(self.commitment, str):
            self.commitment = Commitment(self.commitment)
        if self.confirm_timeout <= 0:
            raise ValueError("confirm_timeout must be positive")
        if self.poll_interval < 0:
            raise ValueError("poll_interval must not be negative")
        if self.max_retries < 0:
            raise ValueError("max_retries must not be negative")

    @property
    def endpoint(self) -> str:
        return resolve_endpoint(self.rpc_url)

    @property
    def cluster(self) -> Optional[str]:
        return self.explorer_cluster or cluster_for(self.rpc_url)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX) -> "ClientConfig":
        """Build a config from environment variables such as SAS_RPC_URL."""
        environ = os.environ if environ is None else environ
        kwargs = {}
        for f in fields(cls):
            key = f"{prefix}{f.name.upper()}"
            if key not in environ:
                continue
            raw = environ[key]
            if f.type is bool:
                kwargs[f.name] = _parse_bool(key, raw)
            elif f.type is int:
                kwargs[f.name] = int(raw)
            elif f.type is float:
                kwargs[f.name] = float(raw)
            elif f.type is Commitment:
                kwargs[f.name] = Commitment(raw.strip().lower())
            else:
                kwargs[f.name] = raw
        return cls(**kwargs)
