"""
Merkle Proof Service Package

This package exposes the Merkle engine to callers over HTTP. It includes:

- ProofService: Stateless service layer shared by the REST API and the CLI
- rest_api: FastAPI application and server runner

Usage:
    from merkle_proofs.api import ProofService

    service = ProofService()
    result = service.compute_root(["2bc7f5da...", "aa78d5a5..."])
"""

from .proof_service import ProofService, ProofServiceError

__all__ = [
    'ProofService',
    'ProofServiceError',
]
