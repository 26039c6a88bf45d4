"""
Digest Text Utilities

This module provides the input gate for digest values crossing a boundary.
Digests travel as 64-character lowercase hex text; inside the engine they are
32-byte ``bytes`` values.
"""

import re
from typing import Any, Iterable, List

from ..constants import DIGEST_HEX_PATTERN, DIGEST_SIZE
from ..merkle.errors import InvalidDigestFormatError

_DIGEST_RE = re.compile(DIGEST_HEX_PATTERN)


def is_valid_digest_text(value: Any) -> bool:
    """
    Check whether a value is a well-formed digest in text form.

    Args:
        value: Candidate digest text

    Returns:
        True if value is a str of exactly 64 characters in [0-9a-f]

    Examples:
        >>> is_valid_digest_text("ab" * 32)
        True
        >>> is_valid_digest_text("AB" * 32)
        False
        >>> is_valid_digest_text("xyz")
        False
    """
    # fullmatch so a trailing newline is not accepted by "$"
    return isinstance(value, str) and _DIGEST_RE.fullmatch(value) is not None


def digest_from_hex(value: Any) -> bytes:
    """
    Decode digest text into its 32-byte form.

    Args:
        value: 64-character lowercase hex string

    Returns:
        The 32 digest bytes

    Raises:
        InvalidDigestFormatError: If value does not have the digest shape
    """
    if not is_valid_digest_text(value):
        raise InvalidDigestFormatError(f"Invalid hash format: {_preview(value)}")
    return bytes.fromhex(value)


def digests_from_hex(values: Iterable[Any]) -> List[bytes]:
    """
    Decode a list of digest texts, rejecting the first malformed entry.

    Raises:
        InvalidDigestFormatError: Naming the position of the bad entry
    """
    digests = []
    for position, value in enumerate(values):
        if not is_valid_digest_text(value):
            raise InvalidDigestFormatError(
                f"Invalid hash format at position {position}: {_preview(value)}"
            )
        digests.append(bytes.fromhex(value))
    return digests


def digest_to_hex(digest: bytes) -> str:
    """
    Encode a 32-byte digest as lowercase hex text.

    Raises:
        InvalidDigestFormatError: If digest is not exactly 32 bytes
    """
    ensure_digest_bytes(digest)
    return digest.hex()


def ensure_digest_bytes(digest: Any) -> bytes:
    """Reject anything that is not a 32-byte digest."""
    if not isinstance(digest, (bytes, bytearray)) or len(digest) != DIGEST_SIZE:
        raise InvalidDigestFormatError(
            f"Digest must be {DIGEST_SIZE} bytes, got {_preview(digest)}"
        )
    return bytes(digest)


def _preview(value: Any) -> str:
    text = repr(value)
    if len(text) > 80:
        return f"{text[:38]}...{text[-38:]}"
    return text
