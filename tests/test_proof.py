"""
Proof Generation and Verification Tests

Round-trips every leaf of trees of several sizes, checks tamper
sensitivity, and pins down the legacy left-biased walk.
"""

import hashlib
import unittest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from merkle_proofs.constants import NodeEncoding
from merkle_proofs.merkle import (
    MerkleProof,
    hash_pair,
    build_merkle_tree,
    merkle_root,
    get_proof,
    get_proof_indices,
    get_tree_depth,
    compute_root_from_proof,
    verify_merkle_root,
    verify_merkle_proof,
    verification_mode,
    batch_verify_proofs,
    EmptyInputError,
    IndexOutOfRangeError,
)


def leaf(name: str) -> bytes:
    return hashlib.sha256(name.encode("utf-8")).digest()


def flip(value: bytes, position: int = 0) -> bytes:
    mutated = bytearray(value)
    mutated[position] ^= 0x01
    return bytes(mutated)


def leaves_of(n: int):
    return [leaf(f"file{i}.pdf") for i in range(1, n + 1)]


class TestProofGeneration(unittest.TestCase):

    def test_empty_input_fails(self):
        with self.assertRaises(EmptyInputError):
            get_proof([], 0)

    def test_index_out_of_range(self):
        a, b = leaves_of(2)
        with self.assertRaises(IndexOutOfRangeError):
            get_proof([a, b], 5)
        with self.assertRaises(IndexOutOfRangeError):
            get_proof([a, b], 2)
        with self.assertRaises(IndexOutOfRangeError):
            get_proof([a, b], -1)

    def test_index_error_is_also_index_error(self):
        with self.assertRaises(IndexError):
            get_proof(leaves_of(2), 5)

    def test_single_leaf_has_empty_proof(self):
        h = leaf("only")
        proof = get_proof([h], 0)
        self.assertEqual(proof.siblings, [])
        self.assertEqual(proof.root, h)
        self.assertEqual(len(proof), 0)

    def test_siblings_for_three_leaves(self):
        a, b, c = leaves_of(3)
        self.assertEqual(get_proof([a, b, c], 0).siblings, [b, hash_pair(c, c)])
        self.assertEqual(get_proof([a, b, c], 1).siblings, [a, hash_pair(c, c)])
        # Odd trailing leaf is its own sibling
        self.assertEqual(get_proof([a, b, c], 2).siblings, [c, hash_pair(a, b)])

    def test_proof_carries_position_and_root(self):
        leaves = leaves_of(6)
        proof = get_proof(leaves, 4)
        self.assertEqual(proof.leaf, leaves[4])
        self.assertEqual(proof.leaf_index, 4)
        self.assertEqual(proof.leaf_count, 6)
        self.assertEqual(proof.root, merkle_root(leaves))

    def test_proof_length_is_tree_depth(self):
        for n in range(1, 18):
            leaves = leaves_of(n)
            for i in range(n):
                with self.subTest(leaf_count=n, index=i):
                    self.assertEqual(len(get_proof(leaves, i).siblings), get_tree_depth(n))

    def test_proof_indices(self):
        self.assertEqual(get_proof_indices(2, 3), [2, 0])
        self.assertEqual(get_proof_indices(0, 4), [1, 1])
        self.assertEqual(get_proof_indices(5, 6), [4, 2, 0])
        self.assertEqual(get_proof_indices(0, 1), [])
        with self.assertRaises(IndexOutOfRangeError):
            get_proof_indices(3, 3)

    def test_proof_indices_match_siblings(self):
        leaves = leaves_of(7)
        tree = build_merkle_tree(leaves)
        for i in range(7):
            siblings = get_proof(leaves, i).siblings
            for level, position in enumerate(get_proof_indices(i, 7)):
                self.assertEqual(siblings[level], tree[level][position])


class TestProofVerification(unittest.TestCase):

    def test_round_trip_every_leaf(self):
        for n in range(1, 18):
            leaves = leaves_of(n)
            root = merkle_root(leaves)
            for i in range(n):
                with self.subTest(leaf_count=n, index=i):
                    self.assertTrue(verify_merkle_proof(leaves[i], get_proof(leaves, i), root))

    def test_round_trip_legacy_hex_encoding(self):
        leaves = leaves_of(5)
        root = merkle_root(leaves, NodeEncoding.HEX)
        for i in range(5):
            proof = get_proof(leaves, i, NodeEncoding.HEX)
            self.assertTrue(verify_merkle_proof(leaves[i], proof, root, encoding=NodeEncoding.HEX))
            self.assertFalse(verify_merkle_proof(leaves[i], proof, root))

    def test_tampered_leaf_fails(self):
        leaves = leaves_of(5)
        root = merkle_root(leaves)
        proof = get_proof(leaves, 3)
        for position in (0, 15, 31):
            self.assertFalse(verify_merkle_proof(flip(leaves[3], position), proof, root))

    def test_tampered_sibling_fails(self):
        leaves = leaves_of(5)
        root = merkle_root(leaves)
        proof = get_proof(leaves, 3)
        for step in range(len(proof.siblings)):
            siblings = list(proof.siblings)
            siblings[step] = flip(siblings[step], step)
            tampered = MerkleProof(proof.leaf, proof.leaf_index, proof.leaf_count, siblings, proof.root)
            with self.subTest(step=step):
                self.assertFalse(verify_merkle_proof(leaves[3], tampered, root))

    def test_tampered_root_fails(self):
        leaves = leaves_of(4)
        root = merkle_root(leaves)
        proof = get_proof(leaves, 1)
        self.assertFalse(verify_merkle_proof(leaves[1], proof, flip(root, 31)))

    def test_wrong_index_fails(self):
        leaves = leaves_of(4)
        root = merkle_root(leaves)
        proof = get_proof(leaves, 1)
        self.assertFalse(verify_merkle_proof(leaves[1], proof.siblings, root, leaf_index=0))
        self.assertTrue(verify_merkle_proof(leaves[1], proof.siblings, root, leaf_index=1))

    def test_proof_length_must_match_leaf_count(self):
        leaves = leaves_of(4)
        root = merkle_root(leaves)
        proof = get_proof(leaves, 0)
        too_short = MerkleProof(proof.leaf, 0, 4, proof.siblings[:1], proof.root)
        self.assertFalse(verify_merkle_proof(leaves[0], too_short, root))
        wrong_count = MerkleProof(proof.leaf, 0, 9, proof.siblings, proof.root)
        self.assertFalse(verify_merkle_proof(leaves[0], wrong_count, root))

    def test_index_beyond_path_is_rejected(self):
        leaves = leaves_of(2)
        root = merkle_root(leaves)
        siblings = get_proof(leaves, 1).siblings
        self.assertFalse(verify_merkle_proof(leaves[1], siblings, root, leaf_index=3))

    def test_malformed_values_return_false(self):
        leaves = leaves_of(3)
        root = merkle_root(leaves)
        proof = get_proof(leaves, 0)
        self.assertFalse(verify_merkle_proof(leaves[0][:31], proof, root))
        self.assertFalse(verify_merkle_proof(leaves[0], proof, root[:16]))
        self.assertFalse(verify_merkle_proof(leaves[0], [b"short"], root))
        self.assertFalse(verify_merkle_proof(leaves[0], proof, root, leaf_index=-1))
        self.assertFalse(verify_merkle_proof(leaves[0], None, root))

    def test_single_leaf_proof(self):
        h = leaf("only")
        self.assertTrue(verify_merkle_proof(h, get_proof([h], 0), h))
        self.assertTrue(verify_merkle_proof(h, [], h))


class TestLegacyWalk(unittest.TestCase):
    """Bare sibling lists without an index always hash the running value on the left."""

    def test_left_most_leaf_verifies_without_index(self):
        leaves = leaves_of(5)
        root = merkle_root(leaves)
        siblings = get_proof(leaves, 0).siblings
        self.assertTrue(verify_merkle_proof(leaves[0], siblings, root))

    def test_right_hand_leaf_needs_index(self):
        leaves = leaves_of(4)
        root = merkle_root(leaves)
        siblings = get_proof(leaves, 1).siblings
        self.assertFalse(verify_merkle_proof(leaves[1], siblings, root))
        self.assertTrue(verify_merkle_proof(leaves[1], siblings, root, leaf_index=1))

    def test_trailing_odd_leaf_on_left_side(self):
        # Index 2 of 3 is even at the leaf level but odd one level up
        leaves = leaves_of(3)
        root = merkle_root(leaves)
        siblings = get_proof(leaves, 2).siblings
        self.assertFalse(verify_merkle_proof(leaves[2], siblings, root))
        self.assertTrue(verify_merkle_proof(leaves[2], siblings, root, leaf_index=2))

    def test_compute_root_from_proof_walks(self):
        a, b, c, d = leaves_of(4)
        siblings = [a, hash_pair(c, d)]
        self.assertEqual(
            compute_root_from_proof(b, siblings),
            hash_pair(hash_pair(b, a), hash_pair(c, d)),
        )
        self.assertEqual(compute_root_from_proof(b, siblings, leaf_index=1), merkle_root([a, b, c, d]))

    def test_verification_mode_names(self):
        self.assertEqual(verification_mode(None), "legacy")
        self.assertEqual(verification_mode(0), "positional")


class TestRootVerification(unittest.TestCase):

    def test_agreement(self):
        for n in range(1, 10):
            leaves = leaves_of(n)
            self.assertTrue(verify_merkle_root(leaves, merkle_root(leaves)))

    def test_other_root_is_rejected(self):
        leaves = leaves_of(4)
        self.assertFalse(verify_merkle_root(leaves, leaf("something else")))
        self.assertFalse(verify_merkle_root(leaves, flip(merkle_root(leaves))))

    def test_failures_collapse_to_false(self):
        self.assertFalse(verify_merkle_root([], leaf("x")))
        self.assertFalse(verify_merkle_root([b"short"], leaf("x")))
        self.assertFalse(verify_merkle_root(leaves_of(2), b"short"))

    def test_encoding_must_match(self):
        leaves = leaves_of(3)
        root = merkle_root(leaves, NodeEncoding.HEX)
        self.assertTrue(verify_merkle_root(leaves, root, NodeEncoding.HEX))
        self.assertFalse(verify_merkle_root(leaves, root))


class TestBatchVerification(unittest.TestCase):

    def test_batch_verify(self):
        leaves = leaves_of(6)
        root = merkle_root(leaves)
        proofs = [get_proof(leaves, i) for i in range(6)]
        self.assertEqual(batch_verify_proofs(leaves, proofs, root), [True] * 6)

        proofs[2] = proofs[3]
        results = batch_verify_proofs(leaves, proofs, root)
        self.assertFalse(results[2])
        self.assertEqual(results.count(True), 5)


if __name__ == '__main__':
    unittest.main()
