"""
Digest Primitive

SHA-256 is the single source of hashing for the engine: it turns raw leaf
inputs into leaf digests and combines two child digests into their parent.
Every tree operation must combine nodes with the same encoding, otherwise
roots and proofs produced by different operations will not agree.
"""

import hashlib
from typing import Union

from ..constants import NodeEncoding, DEFAULT_NODE_ENCODING


def sha256(data: Union[bytes, bytearray]) -> bytes:
    """
    Compute the 32-byte SHA-256 digest of a byte sequence.

    Args:
        data: Bytes to hash

    Returns:
        32-byte digest
    """
    return hashlib.sha256(data).digest()


def hash_string(value: str) -> str:
    """
    Hash the UTF-8 encoding of a string.

    This is how raw leaf inputs (file names, file contents read as text)
    become leaf digests.

    Args:
        value: Text to hash

    Returns:
        64-character lowercase hex digest

    Examples:
        >>> hash_string("")
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def hash_pair(left: bytes, right: bytes,
              encoding: NodeEncoding = DEFAULT_NODE_ENCODING) -> bytes:
    """
    Compute the parent digest of two child digests.

    With BYTES encoding the parent is sha256(left || right) over the raw
    digest bytes, with no separator or length prefix. With HEX encoding the
    parent is sha256 of the UTF-8 text left.hex() + right.hex().

    Args:
        left: Left child digest (32 bytes)
        right: Right child digest (32 bytes)
        encoding: Node encoding shared by the whole tree

    Returns:
        32-byte parent digest
    """
    if NodeEncoding(encoding) is NodeEncoding.HEX:
        return sha256((left.hex() + right.hex()).encode("ascii"))
    return sha256(left + right)
