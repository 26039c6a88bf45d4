"""
REST API for Merkle Proofs

This module provides a FastAPI-based REST API for computing Merkle roots,
generating inclusion proofs and verifying both, with full OpenAPI
documentation. It is stateless: records are built and returned, never stored.
"""

import logging
import traceback
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .. import __version__
from ..config import get_settings
from .proof_service import ProofService, ProofServiceError
from ..models.api_models import (
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

# Configure logging
logging.basicConfig(level=getattr(logging, get_settings().log_level, logging.INFO))
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Merkle Proofs API",
    description="""
    Commit batches of file hashes to a single Merkle root and prove that one
    file hash was part of a batch without revealing the others.

    ## Features
    - **Roots**: Fold an ordered list of SHA-256 file hashes into one root
    - **Proofs**: Sibling paths for any leaf, addressed by index or by hash
    - **Verification**: Check a root against a leaf list, or a proof against a root
    - **Records**: Build the record payload (root, proof, file count) for a file

    ## Hash Format
    Every hash is 64 lowercase hex characters, without a `0x` prefix.

    ## Legacy Proofs
    Proofs verified without a `leaf_index` use the legacy walk that always
    puts the running hash on the left. Supply `leaf_index` for proofs of
    right-hand leaves.
    """,
    version=__version__,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    }
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global proof service instance
proof_service = None


def get_proof_service() -> ProofService:
    """Dependency to get the proof service instance."""
    global proof_service
    if proof_service is None:
        proof_service = ProofService()
    return proof_service


@app.exception_handler(ProofServiceError)
async def proof_service_exception_handler(request: Request, exc: ProofServiceError):
    """Handle rejected service requests."""
    logger.error(f"Proof service error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code=exc.code,
            details=exc.details or None
        ).model_dump()
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request bodies that fail model validation."""
    errors = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.error(f"Validation error: {errors}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=errors[0]["msg"] if errors else "Invalid request",
            code="VALIDATION_ERROR",
            details={"errors": errors}
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Merkle Proofs API",
        "version": __version__,
        "description": "Compute and verify Merkle roots and inclusion proofs",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(service: ProofService = Depends(get_proof_service)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        node_encoding=service.encoding.value,
        version=__version__
    )


@app.post("/hash", response_model=HashResponse)
async def hash_value(request: HashRequest, service: ProofService = Depends(get_proof_service)):
    """Hash a raw value (for example a file name) into a leaf digest."""
    return HashResponse(**service.hash_value(request.value))


@app.post("/merkle/root", response_model=RootResponse)
async def compute_root(request: RootRequest, service: ProofService = Depends(get_proof_service)):
    """
    Compute the Merkle root of an ordered list of file hashes.

    A lone trailing node at any level is paired with itself.
    """
    return RootResponse(**service.compute_root(request.file_hashes))


@app.post("/merkle/proof", response_model=ProofResponse)
async def create_proof(request: ProofRequest, service: ProofService = Depends(get_proof_service)):
    """
    Generate an inclusion proof for one leaf.

    The leaf can be identified by either:
    - `leaf_index`: position in `file_hashes`
    - `leaf_hash`: its hash (first occurrence)

    When neither is given the first leaf is proven.
    """
    result = service.create_proof(request.file_hashes, request.leaf_index, request.leaf_hash)
    return ProofResponse(**result)


@app.post("/merkle/verify-root", response_model=VerifyRootResponse)
async def verify_root(request: VerifyRootRequest, service: ProofService = Depends(get_proof_service)):
    """Verify that a list of file hashes reduces to the expected Merkle root."""
    return VerifyRootResponse(**service.verify_root(request.file_hashes, request.expected_merkle_root))


@app.post("/merkle/verify-proof", response_model=VerifyProofResponse)
async def verify_proof(request: VerifyProofRequest, service: ProofService = Depends(get_proof_service)):
    """
    Verify an inclusion proof against a Merkle root.

    **Verification modes:**
    - `positional`: `leaf_index` given; sibling side follows the index parity
    - `legacy`: no `leaf_index`; the running hash is always the left child
    """
    result = service.verify_proof(
        request.leaf_hash,
        request.proof,
        request.merkle_root,
        leaf_index=request.leaf_index,
        leaf_count=request.leaf_count,
    )
    return VerifyProofResponse(**result)


@app.post("/records", response_model=RecordResponse, status_code=201)
async def create_record(request: RecordRequest, service: ProofService = Depends(get_proof_service)):
    """
    Build the record for a file.

    With `file_hashes` the root is taken over the batch and a proof is
    included when `file_hash` is part of it. Without it the file hash is
    its own root. The record is returned for the caller to store.
    """
    record = service.build_record(request.file_name, request.file_hash, request.file_hashes)
    return RecordResponse(**record)


def run_server(host: str = None, port: int = None, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to (defaults to MERKLE_API_HOST)
        port: Port to bind to (defaults to MERKLE_API_PORT)
        dev: Enable development mode with auto-reload
    """
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    logger.info(f"Starting Merkle Proofs API server on {host}:{port}")
    uvicorn.run(
        "merkle_proofs.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level=settings.log_level.lower()
    )


if __name__ == "__main__":
    run_server(dev=True)
