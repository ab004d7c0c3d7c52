"""
Tests for Tree Builder.

Requires Python 3.11+.
"""

import pytest

from merkle.errors import EmptyInputError, LengthMismatchError
from merkle.hashing import HashFunction, Sha256Hasher
from merkle.models import MerkleTree, PairingMode
from merkle.tree_builder import TreeBuilder, build_tree, build_tree_from_leaves, hash_leaves


class TestTreeBuilder:
    """Test cases for TreeBuilder."""

    def test_empty_input(self, hasher: HashFunction):
        """Zero leaves cannot make a tree."""
        with pytest.raises(EmptyInputError):
            build_tree([], hasher=hasher, mode=PairingMode.SORTED)

        with pytest.raises(EmptyInputError):
            build_tree_from_leaves([], hasher=hasher, mode=PairingMode.SORTED)

    def test_string_items_rejected(self, sha256: HashFunction):
        """Items must be encoded before hashing."""
        with pytest.raises(TypeError):
            build_tree(["a", "b"], hasher=sha256, mode=PairingMode.SORTED)

    def test_single_leaf(self, hasher: HashFunction):
        """A one-leaf tree's root is that leaf's hash."""
        tree = build_tree([b"only"], hasher=hasher, mode=PairingMode.POSITIONAL)

        assert tree.root == hasher.hash(b"only")
        assert tree.depth == 0
        assert tree.leaf_count == 1

    def test_two_leaves(self, sha256: HashFunction):
        """Root of two leaves is the hash of their concatenation."""
        a, b = sha256.hash(b"a"), sha256.hash(b"b")
        tree = build_tree([b"a", b"b"], hasher=sha256, mode=PairingMode.POSITIONAL)

        assert tree.root == sha256.hash(a + b)

    def test_odd_layer_carries_last_leaf(self, sha256: HashFunction):
        """With three leaves the third is carried up unchanged."""
        a, b, c = (sha256.hash(x) for x in (b"a", b"b", b"c"))

        tree = build_tree([b"a", b"b", b"c"], hasher=sha256, mode=PairingMode.POSITIONAL)

        ab = sha256.hash(a + b)
        assert tree.layers[1] == (ab, c)
        assert tree.root == sha256.hash(ab + c)

    def test_odd_layer_sorted(self, sha256: HashFunction):
        """Sorted mode orders leaves and each pair before hashing."""
        leaves = sorted(sha256.hash(x) for x in (b"a", b"b", b"c"))

        tree = build_tree([b"c", b"a", b"b"], hasher=sha256, mode=PairingMode.SORTED)

        first = sha256.hash(leaves[0] + leaves[1])
        parent = sha256.hash(min(first, leaves[2]) + max(first, leaves[2]))
        assert tree.layers[0] == tuple(leaves)
        assert tree.root == parent

    def test_five_leaves_layer_shape(self, hasher: HashFunction):
        """Layers shrink by ceil(n / 2) until one digest remains."""
        tree = build_tree(
            [bytes([i]) for i in range(5)], hasher=hasher, mode=PairingMode.POSITIONAL
        )

        assert [len(layer) for layer in tree.layers] == [5, 3, 2, 1]
        # Carried twice: leaf 4 is still intact one layer up
        assert tree.layers[1][2] == tree.layers[0][4]

    def test_deterministic(self, hasher: HashFunction, whitelist: list[bytes]):
        """Building the same leaves twice gives the same root."""
        for mode in PairingMode:
            first = build_tree(whitelist, hasher=hasher, mode=mode)
            second = build_tree(list(whitelist), hasher=hasher, mode=mode)
            assert first.root == second.root

    def test_sorted_mode_ignores_order(self, hasher: HashFunction, whitelist: list[bytes]):
        """Sorted roots do not depend on input order."""
        forward = build_tree(whitelist, hasher=hasher, mode=PairingMode.SORTED)
        backward = build_tree(whitelist[::-1], hasher=hasher, mode=PairingMode.SORTED)
        shuffled = build_tree(
            whitelist[5:] + whitelist[:5], hasher=hasher, mode=PairingMode.SORTED
        )

        assert forward.root == backward.root == shuffled.root

    def test_positional_mode_is_order_sensitive(self, hasher: HashFunction, abcd: list[bytes]):
        """Positional roots change when the leaves are reordered."""
        forward = build_tree(abcd, hasher=hasher, mode=PairingMode.POSITIONAL)
        backward = build_tree(abcd[::-1], hasher=hasher, mode=PairingMode.POSITIONAL)

        assert forward.root != backward.root

    def test_duplicates_allowed(self, sha256: HashFunction):
        """Duplicate items are kept as separate leaves."""
        tree = build_tree([b"a", b"a", b"b"], hasher=sha256, mode=PairingMode.SORTED)

        assert tree.leaf_count == 3
        assert len(tree.layers[0]) == 3

    def test_original_order_retained(self, sha256: HashFunction, abcd: list[bytes]):
        """The tree remembers input order even when sorted."""
        items = abcd[::-1]
        tree = build_tree(items, hasher=sha256, mode=PairingMode.SORTED)

        assert tree.leaves == hash_leaves(items, sha256)
        assert tree.index_of(sha256.hash(b"d")) == 0

    def test_parallel_matches_serial(self, sha256: HashFunction, whitelist: list[bytes]):
        """Thread-pool hashing builds exactly the serial tree."""
        for mode in PairingMode:
            serial = TreeBuilder(sha256, mode, max_workers=1).build(whitelist)
            parallel = TreeBuilder(sha256, mode, parallel_threshold=1, max_workers=4).build(
                whitelist
            )
            assert parallel.layers == serial.layers

    def test_build_from_leaves(self, keccak256: HashFunction, abcd: list[bytes]):
        """Pre-hashed leaves build the same tree as raw items."""
        leaves = [keccak256.hash(item) for item in abcd]

        from_items = build_tree(abcd, hasher=keccak256, mode=PairingMode.SORTED)
        from_leaves = build_tree_from_leaves(leaves, hasher=keccak256, mode=PairingMode.SORTED)

        assert from_leaves.root == from_items.root

    def test_build_from_leaves_checks_length(self, sha256: HashFunction):
        """Leaves that are not full digests are rejected."""
        with pytest.raises(LengthMismatchError):
            build_tree_from_leaves([b"short"], hasher=sha256, mode=PairingMode.SORTED)

    def test_defaults_from_settings(self, abcd: list[bytes], keccak256: HashFunction):
        """Without arguments the configured hash and mode are used."""
        tree = build_tree(abcd)

        assert tree.hasher.name == "keccak256"
        assert tree.mode is PairingMode.SORTED
        assert tree.root == build_tree(abcd, keccak256, PairingMode.SORTED).root

    def test_tree_is_immutable(self, sha256: HashFunction, abcd: list[bytes]):
        """Built trees cannot be reassigned."""
        tree = build_tree(abcd, hasher=sha256, mode=PairingMode.SORTED)

        with pytest.raises(AttributeError):
            tree.layers = ()  # type: ignore[misc]
        assert isinstance(tree.layers[0], tuple)

    def test_as_dict(self, sha256: HashFunction, abcd: list[bytes]):
        """Report form carries hex digests and tree metadata."""
        tree: MerkleTree = build_tree(abcd, hasher=sha256, mode=PairingMode.SORTED)
        report = tree.as_dict

        assert report["root"] == "0x" + tree.root.hex()
        assert report["hash"] == "sha256"
        assert report["mode"] == "sorted"
        assert report["leaf_count"] == 4
        assert report["depth"] == 2
        assert len(report["layers"]) == 3

    def test_mode_given_as_string(self, sha256: HashFunction, abcd: list[bytes]):
        """A mode's string value selects that mode."""
        tree = build_tree(abcd, hasher=sha256, mode="positional")

        assert tree.mode is PairingMode.POSITIONAL
        assert tree.root == build_tree(abcd, sha256, PairingMode.POSITIONAL).root

    def test_unknown_mode_rejected(self, sha256: HashFunction, abcd: list[bytes]):
        """Names that are not pairing modes are rejected at build time."""
        with pytest.raises(ValueError):
            build_tree(abcd, hasher=sha256, mode="shuffled")

    def test_identical_builds_compare_equal(self, abcd: list[bytes]):
        """Trees built by separate hasher instances are equal values."""
        first = build_tree(abcd, Sha256Hasher(), PairingMode.SORTED)
        second = build_tree(abcd, Sha256Hasher(), PairingMode.SORTED)

        assert first == second
        assert hash(first) == hash(second)
        assert first != build_tree(abcd[:3], Sha256Hasher(), PairingMode.SORTED)
