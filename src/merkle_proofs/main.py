"""
Merkle Proofs - Main proof generation module

This module contains the hex-text operations used by both the CLI and the
API. Digests enter and leave as 64-character lowercase hex strings; the
engine in ``merkle_proofs.merkle`` works on the decoded 32-byte values.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from .constants import NodeEncoding, DEFAULT_NODE_ENCODING
from .merkle import (
    MerkleProof,
    MerkleError,
    build_merkle_tree,
    get_proof,
    get_tree_depth,
    merkle_root,
    verify_merkle_proof as _verify_proof,
    verify_merkle_root as _verify_root,
)
from .merkle.digest import hash_string
from .utils import digest_from_hex, digests_from_hex, is_valid_digest_text

logger = logging.getLogger(__name__)

__all__ = [
    "ProofResult",
    "RecordResult",
    "hash_string",
    "is_valid_digest_text",
    "generate_merkle_root",
    "generate_merkle_tree",
    "generate_merkle_proof",
    "verify_merkle_root",
    "verify_merkle_proof",
    "build_record",
]


@dataclass
class ProofResult:
    """Container for proof generation results."""
    leaf_hash: str
    leaf_index: int
    leaf_count: int
    proof: List[str]
    merkle_root: str

    def to_merkle_proof(self) -> MerkleProof:
        """Decode back into the engine's proof type."""
        return MerkleProof(
            leaf=digest_from_hex(self.leaf_hash),
            leaf_index=self.leaf_index,
            leaf_count=self.leaf_count,
            siblings=digests_from_hex(self.proof),
            root=digest_from_hex(self.merkle_root),
        )


@dataclass
class RecordResult:
    """Container for a file record ready to be stored by the caller."""
    file_name: str
    file_hash: str
    merkle_root: str
    file_count: int
    merkle_proof: List[str] = field(default_factory=list)
    leaf_index: Optional[int] = None
    verified: bool = False
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_name": self.file_name,
            "file_hash": self.file_hash,
            "merkle_root": self.merkle_root,
            "file_count": self.file_count,
            "merkle_proof": list(self.merkle_proof),
            "leaf_index": self.leaf_index,
            "verified": self.verified,
            "timestamp": self.timestamp,
        }


def generate_merkle_root(leaves: Sequence[str],
                         encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> str:
    """
    Generate a Merkle root from a list of leaf hashes.

    Raises:
        EmptyInputError: If leaves is empty
        InvalidDigestFormatError: If any leaf is not a 64-char hex digest
    """
    return merkle_root(digests_from_hex(leaves), encoding).hex()


def generate_merkle_tree(leaves: Sequence[str],
                         encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> List[List[str]]:
    """Generate every tree level as hex text, leaves first, root last."""
    tree = build_merkle_tree(digests_from_hex(leaves), encoding)
    return [[node.hex() for node in level] for level in tree]


def generate_merkle_proof(leaves: Sequence[str], leaf_index: int,
                          encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> ProofResult:
    """
    Generate the Merkle proof path for the leaf at leaf_index.

    Raises:
        EmptyInputError: If leaves is empty
        IndexOutOfRangeError: If leaf_index is not a valid position
        InvalidDigestFormatError: If any leaf is not a 64-char hex digest
    """
    proof = get_proof(digests_from_hex(leaves), leaf_index, encoding)
    return ProofResult(
        leaf_hash=proof.leaf.hex(),
        leaf_index=proof.leaf_index,
        leaf_count=proof.leaf_count,
        proof=[sibling.hex() for sibling in proof.siblings],
        merkle_root=proof.root.hex(),
    )


def verify_merkle_root(leaves: Sequence[str], expected_root: str,
                       encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> bool:
    """Verify if the computed Merkle root matches the expected root."""
    try:
        return _verify_root(digests_from_hex(leaves), digest_from_hex(expected_root), encoding)
    except (MerkleError, TypeError):
        return False


def verify_merkle_proof(leaf_hash: str,
                        proof: Union[ProofResult, MerkleProof, Sequence[str]],
                        merkle_root_hash: str,
                        leaf_index: Optional[int] = None,
                        leaf_count: Optional[int] = None,
                        encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> bool:
    """
    Verify a Merkle proof against a known Merkle root.

    A ProofResult or MerkleProof supplies its own index and leaf count. A
    bare list of sibling hashes is verified positionally when leaf_index is
    given and with the legacy left-biased walk otherwise. A leaf_count given
    with a bare list rejects paths whose length does not fit that tree, in
    either walk.
    """
    try:
        if isinstance(proof, ProofResult):
            proof = proof.to_merkle_proof()
        elif not isinstance(proof, MerkleProof):
            siblings = digests_from_hex(proof)
            if leaf_count is not None and len(siblings) != get_tree_depth(leaf_count):
                return False
            if leaf_index is not None and leaf_count is not None:
                proof = MerkleProof(
                    leaf=digest_from_hex(leaf_hash),
                    leaf_index=leaf_index,
                    leaf_count=leaf_count,
                    siblings=siblings,
                )
            else:
                proof = siblings
        return _verify_proof(
            digest_from_hex(leaf_hash),
            proof,
            digest_from_hex(merkle_root_hash),
            leaf_index=leaf_index,
            encoding=encoding,
        )
    except (MerkleError, TypeError) as e:
        logger.debug(f"Proof rejected before verification: {e}")
        return False


def build_record(file_name: str, file_hash: str,
                 file_hashes: Optional[Sequence[str]] = None,
                 encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> RecordResult:
    """
    Compute the record for a file, ready for the caller to persist.

    With a non-empty ``file_hashes`` list the root is taken over that list
    and, when ``file_hash`` occurs in it, a proof is produced for its first
    occurrence. Without a list the record covers the single file and its
    hash is the root.

    Raises:
        InvalidDigestFormatError: If file_hash or any listed hash is malformed
        ValueError: If file_name is empty
    """
    if not file_name:
        raise ValueError("file_name is required")

    if file_hashes:
        leaves = digests_from_hex(file_hashes)
        root = merkle_root(leaves, encoding)

        merkle_proof: List[str] = []
        leaf_index = None
        if file_hash in file_hashes:
            leaf_index = list(file_hashes).index(file_hash)
            proof = get_proof(leaves, leaf_index, encoding)
            merkle_proof = [sibling.hex() for sibling in proof.siblings]
        else:
            digest_from_hex(file_hash)
            logger.info(f"File hash for {file_name} is not among the {len(leaves)} listed hashes; no proof issued")

        return RecordResult(
            file_name=file_name,
            file_hash=file_hash,
            merkle_root=root.hex(),
            file_count=len(leaves),
            merkle_proof=merkle_proof,
            leaf_index=leaf_index,
        )

    # Single file: its hash is the root
    digest_from_hex(file_hash)
    return RecordResult(
        file_name=file_name,
        file_hash=file_hash,
        merkle_root=file_hash,
        file_count=1,
        leaf_index=0,
    )
