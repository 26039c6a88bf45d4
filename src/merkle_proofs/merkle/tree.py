"""
Merkle Tree Building Utilities

This module folds an ordered leaf sequence into its Merkle root. Levels are
paired left to right; when a level has odd length its last node is paired
with a copy of itself (self-duplication padding) rather than promoted. That
rule is part of the commitment format: changing it changes every root and
proof ever issued.
"""

import logging
from typing import List, Sequence

from ..constants import NodeEncoding, DEFAULT_NODE_ENCODING
from .digest import hash_pair
from .errors import EmptyInputError

logger = logging.getLogger(__name__)


def next_level(level: Sequence[bytes],
               encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> List[bytes]:
    """
    Hash one level of the tree into the level above it.

    Args:
        level: Digests of the current level (length >= 1)
        encoding: Node encoding shared by the whole tree

    Returns:
        Parent digests, ceil(len(level) / 2) of them
    """
    parents = []
    for i in range(0, len(level), 2):
        left = level[i]
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(hash_pair(left, right, encoding))
    return parents


def merkle_root(leaves: Sequence[bytes],
                encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> bytes:
    """
    Compute the Merkle root of an ordered sequence of leaf digests.

    Args:
        leaves: Leaf digests in commitment order
        encoding: Node encoding shared by the whole tree

    Returns:
        32-byte Merkle root; a single leaf is its own root

    Raises:
        EmptyInputError: If leaves is empty

    Examples:
        >>> root = merkle_root([sha256(b"a"), sha256(b"b"), sha256(b"c")])
    """
    if not leaves:
        raise EmptyInputError("Leaf list cannot be empty")

    level = list(leaves)
    while len(level) > 1:
        level = next_level(level, encoding)

    logger.debug(f"Reduced {len(leaves)} leaves to root {level[0].hex()}")
    return level[0]


def build_merkle_tree(leaves: Sequence[bytes],
                      encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> List[List[bytes]]:
    """
    Build every level of the tree, from the leaves up to the root.

    Args:
        leaves: Leaf digests in commitment order
        encoding: Node encoding shared by the whole tree

    Returns:
        List of levels where tree[0] is the leaves and tree[-1] == [root]

    Raises:
        EmptyInputError: If leaves is empty
    """
    if not leaves:
        raise EmptyInputError("Leaf list cannot be empty")

    tree = [list(leaves)]
    while len(tree[-1]) > 1:
        tree.append(next_level(tree[-1], encoding))
    return tree


def get_tree_depth(leaf_count: int) -> int:
    """
    Calculate the number of pairing rounds for a given number of leaves.

    This is also the length of every proof in such a tree.

    Args:
        leaf_count: Number of leaves (>= 1)

    Returns:
        ceil(log2(leaf_count)); 0 for a single leaf

    Raises:
        EmptyInputError: If leaf_count is below 1

    Examples:
        >>> get_tree_depth(1)  # Returns 0
        >>> get_tree_depth(3)  # Returns 2
        >>> get_tree_depth(8)  # Returns 3
    """
    if leaf_count < 1:
        raise EmptyInputError("A tree needs at least one leaf")
    return (leaf_count - 1).bit_length()


def validate_tree_structure(tree: List[List[bytes]]) -> bool:
    """
    Validate that a tree has the shape produced by build_merkle_tree.

    Args:
        tree: List of tree levels from leaves to root

    Returns:
        True if tree structure is valid
    """
    if not tree or not tree[0]:
        return False

    # Each level has half the nodes of the previous level, rounded up
    for i in range(1, len(tree)):
        expected_size = (len(tree[i-1]) + 1) // 2
        if len(tree[i]) != expected_size:
            return False

    # Root level should have exactly one node
    return len(tree[-1]) == 1
