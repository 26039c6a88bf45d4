"""
API Models

This module defines Pydantic models for API request and response validation.
Digest-typed fields are checked for the 64-character lowercase hex shape
before any tree operation sees them.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone

from ..utils.hex_helpers import is_valid_digest_text


def _check_digest(v: str) -> str:
    if not is_valid_digest_text(v):
        raise ValueError("Invalid hash format: expected 64 lowercase hex characters")
    return v


def _check_digest_list(v: List[str]) -> List[str]:
    for position, item in enumerate(v):
        if not is_valid_digest_text(item):
            raise ValueError(f"Invalid hash format at position {position}: expected 64 lowercase hex characters")
    return v


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service status
        node_encoding: Node encoding the service combines digests with
        version: Service version
        timestamp: Response timestamp
    """
    status: str = Field(..., description="Service status")
    node_encoding: str = Field(..., description="Node encoding used for tree operations")
    version: str = Field(default="0.1.0", description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp"
    )


class HashRequest(BaseModel):
    """Request model for hashing a raw value into a leaf digest."""
    value: str = Field(..., description="Text to hash (UTF-8)")


class HashResponse(BaseModel):
    """Response model for a hashed value."""
    value: str = Field(..., description="Text that was hashed")
    hash: str = Field(..., description="SHA-256 digest as 64 hex characters")


class RootRequest(BaseModel):
    """
    Request model for Merkle root computation.

    Attributes:
        file_hashes: Ordered leaf digests
    """
    file_hashes: List[str] = Field(..., min_length=1, description="Ordered leaf hashes (64 hex chars each)")

    @field_validator('file_hashes')
    @classmethod
    def validate_file_hashes(cls, v):
        """Validate every leaf is a proper digest."""
        return _check_digest_list(v)


class RootResponse(BaseModel):
    """Response model for Merkle root computation."""
    merkle_root: str = Field(..., description="Merkle root as 64 hex characters")
    file_count: int = Field(..., description="Number of leaves")


class ProofRequest(BaseModel):
    """
    Request model for proof generation.

    The leaf is addressed either by index or by its hash; when both are
    missing the first leaf is proven.

    Attributes:
        file_hashes: Ordered leaf digests
        leaf_index: Position of the leaf to prove
        leaf_hash: Hash of the leaf to prove (first occurrence)
    """
    file_hashes: List[str] = Field(..., min_length=1, description="Ordered leaf hashes (64 hex chars each)")
    leaf_index: Optional[int] = Field(default=None, description="Index of the leaf to prove")
    leaf_hash: Optional[str] = Field(default=None, description="Hash of the leaf to prove")

    @field_validator('file_hashes')
    @classmethod
    def validate_file_hashes(cls, v):
        """Validate every leaf is a proper digest."""
        return _check_digest_list(v)

    @field_validator('leaf_hash')
    @classmethod
    def validate_leaf_hash(cls, v):
        """Validate leaf_hash is a proper digest if provided."""
        if v is not None:
            _check_digest(v)
        return v


class ProofResponse(BaseModel):
    """
    Response model for a generated proof.

    Attributes:
        leaf_hash: Leaf being proven
        leaf_index: Position of the leaf
        leaf_count: Number of leaves in the tree
        proof: Sibling hashes, leaf level first
        merkle_root: Root the proof was generated against
    """
    leaf_hash: str = Field(..., description="Leaf hash being proven")
    leaf_index: int = Field(..., description="Position of the leaf")
    leaf_count: int = Field(..., description="Number of leaves in the tree")
    proof: List[str] = Field(..., description="Sibling hashes from the leaf level up")
    merkle_root: str = Field(..., description="Merkle root as 64 hex characters")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "leaf_hash": "fe3a0126360ed6fcd6bec4f663d404d9791f1b529c7d239024451d57bfd8333a",
            "leaf_index": 2,
            "leaf_count": 3,
            "proof": [
                "fe3a0126360ed6fcd6bec4f663d404d9791f1b529c7d239024451d57bfd8333a",
                "59ada2a1eb088d7d187492dd7a57b02eaa99012c8ede107c613217ad31745b1d"
            ],
            "merkle_root": "0746f108b3c34f79507f76ae298ca6b7fc81ecb5d0ccbcb4e36fe04701b97dab"
        }
    })


class VerifyRootRequest(BaseModel):
    """Request model for Merkle root verification."""
    file_hashes: List[str] = Field(..., min_length=1, description="Ordered leaf hashes (64 hex chars each)")
    expected_merkle_root: str = Field(..., description="Claimed Merkle root")

    @field_validator('file_hashes')
    @classmethod
    def validate_file_hashes(cls, v):
        """Validate every leaf is a proper digest."""
        return _check_digest_list(v)


class VerifyRootResponse(BaseModel):
    """Response model for Merkle root verification."""
    is_valid: bool = Field(..., description="Whether the leaves reduce to the claimed root")
    file_count: int = Field(..., description="Number of leaves")
    message: str = Field(..., description="Human readable outcome")


class VerifyProofRequest(BaseModel):
    """
    Request model for proof verification.

    Without leaf_index the proof is checked with the legacy walk that
    always treats the running hash as the left child.

    Attributes:
        leaf_hash: Leaf being proven
        proof: Sibling hashes, leaf level first
        merkle_root: Claimed root
        leaf_index: Optional position of the leaf
        leaf_count: Optional number of leaves in the tree
    """
    leaf_hash: str = Field(..., description="Leaf hash being proven")
    proof: List[str] = Field(..., description="Sibling hashes from the leaf level up")
    merkle_root: str = Field(..., description="Claimed Merkle root")
    leaf_index: Optional[int] = Field(default=None, ge=0, description="Position of the leaf")
    leaf_count: Optional[int] = Field(default=None, ge=1, description="Number of leaves in the tree")


class VerifyProofResponse(BaseModel):
    """Response model for proof verification."""
    is_valid: bool = Field(..., description="Whether the proof reconstructs the claimed root")
    mode: str = Field(..., description="Verification walk used: positional or legacy")
    message: str = Field(..., description="Human readable outcome")


class RecordRequest(BaseModel):
    """
    Request model for building a file record.

    Attributes:
        file_name: Name of the file the record describes
        file_hash: Hash of the file
        file_hashes: Optional batch of hashes the file was committed with
    """
    file_name: str = Field(..., min_length=1, description="File name")
    file_hash: str = Field(..., description="File hash (64 hex chars)")
    file_hashes: List[str] = Field(default_factory=list, description="Batch of hashes to commit")

    @field_validator('file_hashes')
    @classmethod
    def validate_file_hashes(cls, v):
        """Validate every batch entry is a proper digest."""
        return _check_digest_list(v)

    @field_validator('file_hash')
    @classmethod
    def validate_file_hash(cls, v):
        """Validate file_hash is a proper digest."""
        return _check_digest(v)


class RecordResponse(BaseModel):
    """Response model for a built file record."""
    file_name: str
    file_hash: str
    merkle_root: str
    file_count: int
    merkle_proof: List[str] = Field(default_factory=list)
    leaf_index: Optional[int] = None
    verified: bool = False
    timestamp: str
    message: str = Field(default="Record built successfully")
