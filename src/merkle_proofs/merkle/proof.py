"""
Merkle Proof Generation and Verification

This module produces inclusion proofs for a single leaf and checks them
against a claimed root without the other leaves.

Two verification walks are supported:

- positional: the leaf index decides, level by level, whether the running
  hash is the left or the right child. Every proof issued by this library
  carries its index and verifies this way.
- legacy: the running hash is always the left child. Bare sibling lists
  stored by the earlier Node.js service were checked like this; they only
  verify when the leaf sat on the left at every level.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..constants import (
    DIGEST_SIZE,
    NodeEncoding,
    DEFAULT_NODE_ENCODING,
    VERIFY_MODE_LEGACY,
    VERIFY_MODE_POSITIONAL,
)
from .digest import hash_pair
from .errors import EmptyInputError, IndexOutOfRangeError, MerkleError
from .tree import merkle_root, next_level, get_tree_depth

logger = logging.getLogger(__name__)


@dataclass
class MerkleProof:
    """
    Inclusion proof for one leaf of a Merkle tree.

    Attributes:
        leaf: The leaf digest being proven
        leaf_index: 0-based position of the leaf in the leaf sequence
        leaf_count: Number of leaves in the tree that produced the proof
        siblings: Sibling digests from the leaf level up to the root
        root: The Merkle root the proof was generated against
    """
    leaf: bytes
    leaf_index: int
    leaf_count: int
    siblings: List[bytes] = field(default_factory=list)
    root: bytes = b""

    def __len__(self) -> int:
        return len(self.siblings)

    def __iter__(self):
        return iter(self.siblings)


def get_proof(leaves: Sequence[bytes], leaf_index: int,
              encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> MerkleProof:
    """
    Build the inclusion proof for the leaf at ``leaf_index``.

    The tree is reduced exactly as merkle_root does it. At each level the
    pair holding the tracked node starts at 2 * (index // 2); the other
    member of that pair is recorded. For the last node of an odd-length
    level that other member is the node's own duplicate.

    Args:
        leaves: Leaf digests in commitment order
        leaf_index: Position of the leaf to prove
        encoding: Node encoding shared by the whole tree

    Returns:
        MerkleProof with get_tree_depth(len(leaves)) siblings

    Raises:
        EmptyInputError: If leaves is empty
        IndexOutOfRangeError: If leaf_index is not a valid position

    Example:
        >>> proof = get_proof([leaf0, leaf1, leaf2], 2)
        >>> proof.siblings == [leaf2, hash_pair(leaf0, leaf1)]
        True
    """
    if not leaves:
        raise EmptyInputError("Leaf list cannot be empty")
    if isinstance(leaf_index, bool) or not isinstance(leaf_index, int):
        raise IndexOutOfRangeError(leaf_index, len(leaves))
    if leaf_index < 0 or leaf_index >= len(leaves):
        raise IndexOutOfRangeError(leaf_index, len(leaves))

    siblings: List[bytes] = []
    level = list(leaves)
    current_index = leaf_index

    while len(level) > 1:
        pair_start = 2 * (current_index // 2)
        left = level[pair_start]
        right = level[pair_start + 1] if pair_start + 1 < len(level) else left
        siblings.append(right if current_index % 2 == 0 else left)

        level = next_level(level, encoding)
        current_index //= 2

    logger.debug(f"Generated {len(siblings)}-step proof for leaf {leaf_index} of {len(leaves)}")
    return MerkleProof(
        leaf=leaves[leaf_index],
        leaf_index=leaf_index,
        leaf_count=len(leaves),
        siblings=siblings,
        root=level[0],
    )


def get_proof_indices(leaf_index: int, leaf_count: int) -> List[int]:
    """
    Calculate the position of the sibling recorded at each level.

    When the tracked node is the unpaired last node of its level, its
    sibling is itself and its own position is returned.

    Args:
        leaf_index: Index of the target leaf
        leaf_count: Number of leaves in the tree

    Returns:
        List of sibling positions, one per level

    Examples:
        >>> get_proof_indices(2, 3)  # [2, 0]
    """
    if leaf_count < 1:
        raise EmptyInputError("A tree needs at least one leaf")
    if leaf_index < 0 or leaf_index >= leaf_count:
        raise IndexOutOfRangeError(leaf_index, leaf_count)

    indices = []
    current_index = leaf_index
    width = leaf_count

    while width > 1:
        sibling_index = current_index ^ 1
        indices.append(sibling_index if sibling_index < width else current_index)
        current_index //= 2
        width = (width + 1) // 2

    return indices


def compute_root_from_proof(leaf: bytes, siblings: Sequence[bytes],
                            leaf_index: Optional[int] = None,
                            encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> bytes:
    """
    Rebuild the Merkle root from a leaf and its sibling path.

    Args:
        leaf: 32-byte leaf digest
        siblings: Sibling digests, one per level, leaf level first
        leaf_index: Position of the leaf; None selects the legacy walk
        encoding: Node encoding shared by the whole tree

    Returns:
        The reconstructed 32-byte root
    """
    current = leaf
    index = leaf_index
    for sibling in siblings:
        if index is not None and index % 2 == 1:
            # Our node was on the right, sibling is on the left
            current = hash_pair(sibling, current, encoding)
        else:
            current = hash_pair(current, sibling, encoding)
        if index is not None:
            index //= 2
    return current


def verify_merkle_root(leaves: Sequence[bytes], expected_root: bytes,
                       encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> bool:
    """
    Check that a leaf sequence reduces to the expected root.

    Any failure to compute the root (empty input, malformed digests) is
    reported as False.

    Args:
        leaves: Leaf digests in commitment order
        expected_root: Claimed 32-byte root
        encoding: Node encoding shared by the whole tree

    Returns:
        True if the recomputed root equals expected_root
    """
    try:
        if any(not _is_digest(leaf) for leaf in leaves) or not _is_digest(expected_root):
            return False
        return merkle_root(leaves, encoding) == bytes(expected_root)
    except (MerkleError, TypeError) as e:
        logger.debug(f"Root verification could not be completed: {e}")
        return False


def verify_merkle_proof(leaf: bytes,
                        proof: Union[MerkleProof, Sequence[bytes]],
                        expected_root: bytes,
                        leaf_index: Optional[int] = None,
                        encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> bool:
    """
    Verify an inclusion proof against a claimed root.

    The leaf index is taken from ``leaf_index`` or else from a MerkleProof.
    With an index the positional walk is used; a bare sibling list with no
    index falls back to the legacy left-biased walk. When the proof knows
    its leaf count, a sibling path whose length does not match that tree
    shape is rejected.

    Args:
        leaf: The leaf digest being proven
        proof: A MerkleProof or a bare sequence of sibling digests
        expected_root: Claimed 32-byte root
        leaf_index: Optional position of the leaf
        encoding: Node encoding shared by the whole tree

    Returns:
        True if the proof is valid; False on any mismatch or malformed input

    Examples:
        >>> is_valid = verify_merkle_proof(leaf, get_proof(leaves, 5), root)
    """
    try:
        leaf_count = None
        if isinstance(proof, MerkleProof):
            siblings = proof.siblings
            leaf_count = proof.leaf_count
            if leaf_index is None:
                leaf_index = proof.leaf_index
        else:
            siblings = list(proof)

        if not _is_digest(leaf) or not _is_digest(expected_root):
            return False
        if any(not _is_digest(sibling) for sibling in siblings):
            return False

        if leaf_index is not None:
            if isinstance(leaf_index, bool) or not isinstance(leaf_index, int) or leaf_index < 0:
                return False
            if leaf_count is not None:
                if leaf_index >= leaf_count or len(siblings) != get_tree_depth(leaf_count):
                    return False
            elif leaf_index >> len(siblings):
                # The index needs more levels than the path provides
                return False

        computed = compute_root_from_proof(leaf, siblings, leaf_index, encoding)
        return computed == bytes(expected_root)
    except (MerkleError, TypeError, ValueError) as e:
        logger.debug(f"Proof verification could not be completed: {e}")
        return False


def verification_mode(leaf_index: Optional[int]) -> str:
    """Name the walk verify_merkle_proof uses for a given index."""
    return VERIFY_MODE_LEGACY if leaf_index is None else VERIFY_MODE_POSITIONAL


def batch_verify_proofs(
    leaves: Sequence[bytes],
    proofs: Sequence[Union[MerkleProof, Sequence[bytes]]],
    expected_root: bytes,
    encoding: NodeEncoding = DEFAULT_NODE_ENCODING
) -> List[bool]:
    """
    Verify multiple proofs against the same root.

    Args:
        leaves: Leaf digests being proven
        proofs: One proof per leaf
        expected_root: Claimed 32-byte root
        encoding: Node encoding shared by the whole tree

    Returns:
        List of boolean results for each proof
    """
    results = []
    for leaf, proof in zip(leaves, proofs):
        results.append(verify_merkle_proof(leaf, proof, expected_root, encoding=encoding))
    return results


def _is_digest(value) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) == DIGEST_SIZE
