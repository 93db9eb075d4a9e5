"""
Service package providing the attestation flows as one facade.
"""

from .service import (
    AttestationService,
    OperationResult,
    ServiceStatus,
    attestation_mint_size,
    create_service,
)

__all__ = [
    'AttestationService',
    'OperationResult',
    'ServiceStatus',
    'attestation_mint_size',
    'create_service',
]
