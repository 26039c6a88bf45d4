"""
Merkle Proofs

Deterministic binary Merkle trees over SHA-256 leaf digests: root
computation, inclusion proof generation, and proof/root verification, with a
FastAPI service and a CLI on top.

Usage:
    from merkle_proofs import generate_merkle_root, generate_merkle_proof, verify_merkle_proof

    leaves = [hash_string(name) for name in ["file1.pdf", "file2.pdf", "file3.pdf"]]
    root = generate_merkle_root(leaves)
    proof = generate_merkle_proof(leaves, 2)
    assert verify_merkle_proof(leaves[2], proof, root)
"""

__version__ = "0.1.0"

from .constants import NodeEncoding
from .main import (
    ProofResult,
    RecordResult,
    hash_string,
    is_valid_digest_text,
    generate_merkle_root,
    generate_merkle_tree,
    generate_merkle_proof,
    verify_merkle_root,
    verify_merkle_proof,
    build_record,
)
from .merkle import (
    MerkleError,
    EmptyInputError,
    IndexOutOfRangeError,
    InvalidDigestFormatError,
)

__all__ = [
    '__version__',
    'NodeEncoding',
    'ProofResult',
    'RecordResult',
    'hash_string',
    'is_valid_digest_text',
    'generate_merkle_root',
    'generate_merkle_tree',
    'generate_merkle_proof',
    'verify_merkle_root',
    'verify_merkle_proof',
    'build_record',
    'MerkleError',
    'EmptyInputError',
    'IndexOutOfRangeError',
    'InvalidDigestFormatError',
]
