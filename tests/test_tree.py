"""
Root Reducer Tests

Covers determinism, single-leaf identity, self-duplication padding and the
cross-implementation golden vector.
"""

import hashlib
import unittest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from merkle_proofs.constants import NodeEncoding
from merkle_proofs.merkle import (
    sha256,
    hash_pair,
    merkle_root,
    build_merkle_tree,
    get_tree_depth,
    validate_tree_structure,
    next_level,
    EmptyInputError,
)


def leaf(name: str) -> bytes:
    return hashlib.sha256(name.encode("utf-8")).digest()


FILES = [leaf("file1.pdf"), leaf("file2.pdf"), leaf("file3.pdf")]
GOLDEN_ROOT_BYTES = "0746f108b3c34f79507f76ae298ca6b7fc81ecb5d0ccbcb4e36fe04701b97dab"
GOLDEN_ROOT_HEX = "0a75c57d690d637366bbf3706259f0393dbed6c86eab9e53a56b30062eebd283"


class TestMerkleRoot(unittest.TestCase):

    def test_empty_input_fails(self):
        with self.assertRaises(EmptyInputError):
            merkle_root([])

    def test_single_leaf_is_its_own_root(self):
        self.assertEqual(merkle_root([FILES[0]]), FILES[0])

    def test_two_leaves(self):
        a, b = FILES[0], FILES[1]
        self.assertEqual(merkle_root([a, b]), sha256(a + b))

    def test_odd_length_self_duplication(self):
        a, b, c = FILES
        expected = sha256(sha256(a + b) + sha256(c + c))
        self.assertEqual(merkle_root([a, b, c]), expected)

    def test_five_leaves_duplicate_on_every_odd_level(self):
        leaves = [leaf(f"doc{i}") for i in range(5)]
        a, b, c, d, e = leaves
        ab, cd, ee = sha256(a + b), sha256(c + d), sha256(e + e)
        expected = sha256(sha256(ab + cd) + sha256(ee + ee))
        self.assertEqual(merkle_root(leaves), expected)

    def test_determinism(self):
        leaves = [leaf(f"item-{i}") for i in range(11)]
        self.assertEqual(merkle_root(leaves), merkle_root(list(leaves)))

    def test_order_matters(self):
        a, b, c = FILES
        self.assertNotEqual(merkle_root([a, b, c]), merkle_root([b, a, c]))

    def test_golden_vector(self):
        self.assertEqual(merkle_root(FILES).hex(), GOLDEN_ROOT_BYTES)

    def test_golden_vector_legacy_hex_encoding(self):
        self.assertEqual(merkle_root(FILES, NodeEncoding.HEX).hex(), GOLDEN_ROOT_HEX)

    def test_input_is_not_mutated(self):
        leaves = list(FILES)
        merkle_root(leaves)
        self.assertEqual(leaves, FILES)


class TestTreeBuilding(unittest.TestCase):

    def test_next_level_pairs_and_pads(self):
        a, b, c = FILES
        self.assertEqual(next_level([a, b, c]), [hash_pair(a, b), hash_pair(c, c)])

    def test_build_tree_levels(self):
        tree = build_merkle_tree(FILES)
        self.assertEqual([len(level) for level in tree], [3, 2, 1])
        self.assertEqual(tree[0], FILES)
        self.assertEqual(tree[-1][0], merkle_root(FILES))
        self.assertTrue(validate_tree_structure(tree))

    def test_build_tree_empty(self):
        with self.assertRaises(EmptyInputError):
            build_merkle_tree([])

    def test_validate_tree_structure_rejects_bad_shapes(self):
        self.assertFalse(validate_tree_structure([]))
        self.assertFalse(validate_tree_structure([FILES]))
        self.assertFalse(validate_tree_structure([FILES, [FILES[0]]]))

    def test_tree_depth(self):
        self.assertEqual(get_tree_depth(1), 0)
        self.assertEqual(get_tree_depth(2), 1)
        self.assertEqual(get_tree_depth(3), 2)
        self.assertEqual(get_tree_depth(4), 2)
        self.assertEqual(get_tree_depth(5), 3)
        self.assertEqual(get_tree_depth(1024), 10)
        self.assertEqual(get_tree_depth(1025), 11)
        with self.assertRaises(EmptyInputError):
            get_tree_depth(0)

    def test_depth_matches_built_tree(self):
        for n in range(1, 20):
            with self.subTest(leaf_count=n):
                tree = build_merkle_tree([leaf(str(i)) for i in range(n)])
                self.assertEqual(len(tree) - 1, get_tree_depth(n))


if __name__ == '__main__':
    unittest.main()
