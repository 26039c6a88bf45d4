"""
Merkle Engine Constants

This module contains the constants shared by the digest primitive, the tree
builder and the proof verifier, plus the defaults used by the service layer.
"""

from enum import Enum

# ====================
# Digest Shape
# ====================

# SHA-256 output size in bytes
DIGEST_SIZE = 32

# Digests cross every boundary as lowercase hex text of this length
DIGEST_HEX_LENGTH = DIGEST_SIZE * 2

# Allowed characters of a digest in text form (case-sensitive)
DIGEST_HEX_PATTERN = r"^[0-9a-f]{64}$"


# ====================
# Node Encoding
# ====================

class NodeEncoding(str, Enum):
    """
    How two child digests are joined before hashing their parent.

    BYTES hashes the raw 64-byte concatenation of the two 32-byte children.
    HEX hashes the UTF-8 bytes of the concatenated 128-character hex text,
    which is what records issued by the earlier Node.js service used.
    """
    BYTES = "bytes"
    HEX = "hex"


DEFAULT_NODE_ENCODING = NodeEncoding.BYTES


# ====================
# Service Limits
# ====================

# Maximum number of leaves accepted by a single service call
DEFAULT_MAX_LEAVES = 100_000


# ====================
# Verification Modes
# ====================

# Sibling always on the right; matches proofs stored without a leaf index
VERIFY_MODE_LEGACY = "legacy"

# Sibling side chosen from the leaf index parity at every level
VERIFY_MODE_POSITIONAL = "positional"
