"""
Merkle Engine Errors

Precondition violations raised by the tree builder, the proof generator and
the digest text gate. The verifiers never raise these; they report False.
"""


class MerkleError(ValueError):
    """Base class for all Merkle engine errors."""
    pass


class EmptyInputError(MerkleError):
    """Raised when a leaf sequence with at least one element is required."""
    pass


class IndexOutOfRangeError(MerkleError, IndexError):
    """Raised when a leaf index does not address a leaf of the sequence."""

    def __init__(self, index: int, leaf_count: int):
        self.index = index
        self.leaf_count = leaf_count
        super().__init__(
            f"Leaf index {index} out of range for {leaf_count} leaves (0-{leaf_count - 1})"
        )


class InvalidDigestFormatError(MerkleError):
    """Raised when a value is not a 64-character lowercase hex digest."""
    pass
