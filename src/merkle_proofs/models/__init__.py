"""
API Models Package

This package contains request and response models for the Merkle proof API.
It includes Pydantic models for validation and serialization of:

- Root, proof and record requests (leaf hash lists, leaf index)
- Root, proof, verification and record responses
- Error responses and status models

Usage:
    from merkle_proofs.models import ProofRequest, ProofResponse

    request = ProofRequest(file_hashes=[...], leaf_index=2)
"""

from .api_models import (
    ErrorResponse,
    HealthResponse,
    HashRequest,
    HashResponse,
    RootRequest,
    RootResponse,
    ProofRequest,
    ProofResponse,
    VerifyRootRequest,
    VerifyRootResponse,
    VerifyProofRequest,
    VerifyProofResponse,
    RecordRequest,
    RecordResponse,
)

__all__ = [
    'ErrorResponse',
    'HealthResponse',
    'HashRequest',
    'HashResponse',
    'RootRequest',
    'RootResponse',
    'ProofRequest',
    'ProofResponse',
    'VerifyRootRequest',
    'VerifyRootResponse',
    'VerifyProofRequest',
    'VerifyProofResponse',
    'RecordRequest',
    'RecordResponse',
]
