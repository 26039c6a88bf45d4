"""
Proof Service Module

This module provides a service layer for building roots, proofs and records
using the hex-text functions from main.py. It gates every hash before it
reaches the engine and turns engine errors into ProofServiceError.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..config import Settings, get_settings
from ..constants import NodeEncoding
from ..main import (
    build_record,
    generate_merkle_proof,
    generate_merkle_root,
    hash_string,
    verify_merkle_proof,
    verify_merkle_root,
)
from ..merkle import (
    EmptyInputError,
    IndexOutOfRangeError,
    InvalidDigestFormatError,
    verification_mode,
)
from ..utils import is_valid_digest_text

logger = logging.getLogger(__name__)


class ProofServiceError(Exception):
    """Exception raised when a service request cannot be fulfilled."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ProofService:
    """Service for computing Merkle roots, proofs and file records."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the proof service.

        Args:
            settings: Service settings. If None, they are read from the environment.
        """
        self.settings = settings or get_settings()

    @property
    def encoding(self) -> NodeEncoding:
        return self.settings.node_encoding

    def hash_value(self, value: str) -> Dict[str, Any]:
        """Hash a raw text value into a leaf digest."""
        if not isinstance(value, str):
            raise ProofServiceError("value must be a string", code="MISSING_FIELD")
        return {"value": value, "hash": hash_string(value)}

    def compute_root(self, file_hashes: Sequence[str]) -> Dict[str, Any]:
        """
        Compute the Merkle root of a list of file hashes.

        Raises:
            ProofServiceError: If the list is empty, too large or malformed
        """
        self._check_hashes(file_hashes)
        try:
            root = generate_merkle_root(file_hashes, self.encoding)
        except (EmptyInputError, InvalidDigestFormatError) as e:
            raise self._wrap(e)

        logger.info(f"Computed Merkle root {root} over {len(file_hashes)} leaves")
        return {"merkle_root": root, "file_count": len(file_hashes)}

    def create_proof(
        self,
        file_hashes: Sequence[str],
        leaf_index: Optional[int] = None,
        leaf_hash: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Generate an inclusion proof for one leaf.

        Args:
            file_hashes: Ordered leaf hashes
            leaf_index: Position of the leaf to prove
            leaf_hash: Hash of the leaf to prove, used when leaf_index is None

        Returns:
            Dictionary with leaf_hash, leaf_index, leaf_count, proof and merkle_root

        Raises:
            ProofServiceError: If the leaf cannot be addressed or inputs are malformed
        """
        self._check_hashes(file_hashes)
        index = self.resolve_leaf_index(file_hashes, leaf_index, leaf_hash)

        try:
            result = generate_merkle_proof(file_hashes, index, self.encoding)
        except (EmptyInputError, IndexOutOfRangeError, InvalidDigestFormatError) as e:
            raise self._wrap(e)

        logger.info(f"Generated {len(result.proof)}-step proof for leaf {index} of {result.leaf_count}")
        return {
            "leaf_hash": result.leaf_hash,
            "leaf_index": result.leaf_index,
            "leaf_count": result.leaf_count,
            "proof": result.proof,
            "merkle_root": result.merkle_root,
        }

    def resolve_leaf_index(
        self,
        file_hashes: Sequence[str],
        leaf_index: Optional[int] = None,
        leaf_hash: Optional[str] = None
    ) -> int:
        """
        Resolve a leaf identifier (index or hash) to a leaf index.

        Raises:
            ProofServiceError: If the index is not an integer or out of range, or the hash is not listed
        """
        if leaf_index is not None:
            if isinstance(leaf_index, bool) or not isinstance(leaf_index, int):
                raise ProofServiceError(
                    f"leaf_index must be an integer, got {leaf_index!r}",
                    code="VALIDATION_ERROR",
                )
            if leaf_index < 0 or leaf_index >= len(file_hashes):
                raise ProofServiceError(
                    f"Leaf index {leaf_index} out of range (0-{len(file_hashes) - 1})",
                    code="INDEX_OUT_OF_RANGE",
                    details={"leaf_index": leaf_index, "leaf_count": len(file_hashes)},
                )
            return leaf_index

        if leaf_hash is not None:
            if not is_valid_digest_text(leaf_hash):
                raise ProofServiceError("Invalid hash format", code="INVALID_DIGEST_FORMAT")
            try:
                index = list(file_hashes).index(leaf_hash)
            except ValueError:
                raise ProofServiceError(
                    f"Leaf hash {leaf_hash} not found among {len(file_hashes)} hashes",
                    code="INDEX_OUT_OF_RANGE",
                )
            logger.info(f"Resolved leaf hash {leaf_hash} to index {index}")
            return index

        return 0

    def verify_root(self, file_hashes: Sequence[str], expected_merkle_root: str) -> Dict[str, Any]:
        """
        Check whether the hashes reduce to the expected root.

        Malformed leaf hashes are rejected like the other operations; a
        malformed or wrong root simply reads as not verified.
        """
        self._check_hashes(file_hashes)
        if not expected_merkle_root:
            raise ProofServiceError("expected_merkle_root is required", code="MISSING_FIELD")

        is_valid = verify_merkle_root(file_hashes, expected_merkle_root, self.encoding)
        logger.info(f"Root verification over {len(file_hashes)} leaves: {'valid' if is_valid else 'invalid'}")
        return {
            "is_valid": is_valid,
            "file_count": len(file_hashes),
            "message": "Merkle root verified successfully" if is_valid else "Merkle root verification failed",
        }

    def verify_proof(
        self,
        leaf_hash: str,
        proof: Sequence[str],
        merkle_root: str,
        leaf_index: Optional[int] = None,
        leaf_count: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Verify an inclusion proof.

        Without leaf_index the legacy walk is used, which matches proofs
        stored without positional information.
        """
        if not leaf_hash or proof is None or not merkle_root:
            raise ProofServiceError(
                "leaf_hash, proof array, and merkle_root are required", code="MISSING_FIELD"
            )
        if len(proof) > self.settings.max_leaves:
            raise ProofServiceError(
                f"Proof has {len(proof)} entries, more than the {self.settings.max_leaves} allowed",
                code="INPUT_TOO_LARGE",
            )

        is_valid = verify_merkle_proof(
            leaf_hash, list(proof), merkle_root,
            leaf_index=leaf_index, leaf_count=leaf_count, encoding=self.encoding,
        )
        mode = verification_mode(leaf_index)
        logger.info(f"Proof verification ({mode}) for leaf {leaf_hash}: {'valid' if is_valid else 'invalid'}")
        return {
            "is_valid": is_valid,
            "mode": mode,
            "message": "Merkle proof verified successfully" if is_valid else "Merkle proof verification failed",
        }

    def build_record(
        self,
        file_name: str,
        file_hash: str,
        file_hashes: Optional[Sequence[str]] = None
    ) -> Dict[str, Any]:
        """
        Build the record for a file without persisting it.

        Returns:
            Record dictionary (file_name, file_hash, merkle_root, file_count,
            merkle_proof, leaf_index, verified, timestamp)

        Raises:
            ProofServiceError: If required fields are missing or malformed
        """
        if not file_name or not file_hash:
            raise ProofServiceError("file_name and file_hash are required", code="MISSING_FIELD")
        if file_hashes:
            self._check_hashes(file_hashes)
        if not is_valid_digest_text(file_hash):
            raise ProofServiceError("Invalid hash format", code="INVALID_DIGEST_FORMAT")

        try:
            record = build_record(file_name, file_hash, file_hashes, self.encoding)
        except (EmptyInputError, IndexOutOfRangeError, InvalidDigestFormatError) as e:
            raise self._wrap(e)

        logger.info(f"Built record for {file_name}: root {record.merkle_root} over {record.file_count} files")
        return record.to_dict()

    def _check_hashes(self, file_hashes: Sequence[str]) -> List[str]:
        if not file_hashes:
            raise ProofServiceError("file_hashes array is required", code="EMPTY_INPUT")
        if len(file_hashes) > self.settings.max_leaves:
            raise ProofServiceError(
                f"{len(file_hashes)} hashes exceed the limit of {self.settings.max_leaves}",
                code="INPUT_TOO_LARGE",
                details={"max_leaves": self.settings.max_leaves},
            )
        for position, value in enumerate(file_hashes):
            if not is_valid_digest_text(value):
                raise ProofServiceError(
                    "Invalid hash format",
                    code="INVALID_DIGEST_FORMAT",
                    details={"position": position},
                )
        return list(file_hashes)

    @staticmethod
    def _wrap(error: Exception) -> ProofServiceError:
        if isinstance(error, EmptyInputError):
            code = "EMPTY_INPUT"
        elif isinstance(error, IndexOutOfRangeError):
            code = "INDEX_OUT_OF_RANGE"
        elif isinstance(error, InvalidDigestFormatError):
            code = "INVALID_DIGEST_FORMAT"
        else:
            code = "VALIDATION_ERROR"
        logger.error(f"Merkle operation failed: {error}")
        return ProofServiceError(str(error), code=code)
