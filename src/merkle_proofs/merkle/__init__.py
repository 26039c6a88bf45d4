"""
Merkle Tree Operations

This package provides the binary Merkle-tree engine: the digest primitive,
root reduction, inclusion proof generation and proof/root verification.

The module is organized into four components:
- digest: SHA-256 primitive and the node combiner
- tree: Level reduction and tree building utilities
- proof: Proof generation and verification functions
- errors: Precondition violations raised by the above
"""

# Digest primitive
from .digest import (
    sha256,
    hash_string,
    hash_pair,
)

# Tree building utilities
from .tree import (
    next_level,
    merkle_root,
    build_merkle_tree,
    get_tree_depth,
    validate_tree_structure,
)

# Proof generation and verification
from .proof import (
    MerkleProof,
    get_proof,
    get_proof_indices,
    compute_root_from_proof,
    verify_merkle_root,
    verify_merkle_proof,
    verification_mode,
    batch_verify_proofs,
)

from .errors import (
    MerkleError,
    EmptyInputError,
    IndexOutOfRangeError,
    InvalidDigestFormatError,
)

__all__ = [
    # Digest primitive
    "sha256",
    "hash_string",
    "hash_pair",
    # Tree utilities
    "next_level",
    "merkle_root",
    "build_merkle_tree",
    "get_tree_depth",
    "validate_tree_structure",
    # Proof functions
    "MerkleProof",
    "get_proof",
    "get_proof_indices",
    "compute_root_from_proof",
    "verify_merkle_root",
    "verify_merkle_proof",
    "verification_mode",
    "batch_verify_proofs",
    # Errors
    "MerkleError",
    "EmptyInputError",
    "IndexOutOfRangeError",
    "InvalidDigestFormatError",
]
