"""
Utility Functions

Digest text gating and hex conversion helpers used by the engine facade,
the service layer and the API models.
"""

from .hex_helpers import (
    is_valid_digest_text,
    digest_from_hex,
    digests_from_hex,
    digest_to_hex,
    ensure_digest_bytes,
)

__all__ = [
    'is_valid_digest_text',
    'digest_from_hex',
    'digests_from_hex',
    'digest_to_hex',
    'ensure_digest_bytes',
]
