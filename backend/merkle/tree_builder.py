"""
Merkle Whitelist Tree Builder.

Folds a set of leaves into successive pairwise-hashed layers
until a single root digest remains.
Requires Python 3.11+.
"""

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from merkle.errors import EmptyInputError, LengthMismatchError
from merkle.hashing import HashFunction, default_hasher, hash_item, hash_pair
from merkle.models import Layer, MerkleTree, PairingMode
from utils.config import get_settings
from utils.logger import LoggerMixin


def hash_leaves(items: Iterable[bytes], hasher: HashFunction) -> Layer:
    """
    Map raw input items to leaf digests, keeping input order.

    Raises:
        TypeError: If an item is not bytes-like
    """
    return tuple(hash_item(hasher, item) for item in items)


class TreeBuilder(LoggerMixin):
    """
    Builds immutable Merkle trees.

    Pairs are hashed bottom-up one layer at a time. Large layers
    may be hashed on a thread pool, but a layer is always complete
    before the next one starts.
    """

    def __init__(
        self,
        hasher: HashFunction | None = None,
        mode: PairingMode | str | None = None,
        parallel_threshold: int | None = None,
        max_workers: int | None = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            hasher: Digest function (defaults to the configured one)
            mode: Pairing mode or its value (defaults to the configured one)
            parallel_threshold: Pairs per layer before using the thread pool
            max_workers: Thread pool size; 1 disables parallel hashing

        Raises:
            ValueError: If ``mode`` names no pairing mode
        """
        settings = get_settings().merkle
        self._hasher = hasher or default_hasher()
        self._mode = PairingMode.resolve(mode)
        self._parallel_threshold = parallel_threshold or settings.parallel_threshold
        self._max_workers = max_workers or settings.max_workers

    @property
    def hasher(self) -> HashFunction:
        return self._hasher

    @property
    def mode(self) -> PairingMode:
        return self._mode

    def build(self, items: Iterable[bytes]) -> MerkleTree:
        """
        Hash raw items into leaves and build the tree.

        Args:
            items: Ordered input items (duplicates allowed)

        Returns:
            Built MerkleTree

        Raises:
            EmptyInputError: If there are no items
        """
        return self.build_from_leaves(hash_leaves(items, self._hasher))

    def build_from_leaves(self, leaves: Sequence[bytes]) -> MerkleTree:
        """
        Build a tree from leaf digests that are already hashed.

        Raises:
            EmptyInputError: If there are no leaves
            LengthMismatchError: If a leaf is not a digest of the right size
        """
        leaves = tuple(bytes(leaf) for leaf in leaves)
        if not leaves:
            raise EmptyInputError()
        for leaf in leaves:
            if len(leaf) != self._hasher.digest_size:
                raise LengthMismatchError("leaf", self._hasher.digest_size, len(leaf))

        bottom = tuple(sorted(leaves)) if self._mode.sorts else leaves
        layers = [bottom]
        while len(layers[-1]) > 1:
            layers.append(self._fold(layers[-1]))

        tree = MerkleTree(
            layers=tuple(layers),
            leaves=leaves,
            mode=self._mode,
            hasher=self._hasher,
        )
        self.log.debug(
            "tree_built",
            leaf_count=tree.leaf_count,
            depth=tree.depth,
            mode=self._mode.value,
            hash=self._hasher.name,
            root=tree.root_hex,
        )
        return tree

    def _fold(self, layer: Layer) -> Layer:
        """Hash adjacent pairs of a layer into the next layer up."""
        pair_count = len(layer) // 2
        lefts = layer[0 : 2 * pair_count : 2]
        rights = layer[1 : 2 * pair_count : 2]

        if self._max_workers > 1 and pair_count >= self._parallel_threshold:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                parents = list(pool.map(self._hash_pair, lefts, rights))
        else:
            parents = [self._hash_pair(left, right) for left, right in zip(lefts, rights)]

        if len(layer) % 2:
            # Odd trailing digest is carried up unchanged
            parents.append(layer[-1])
        return tuple(parents)

    def _hash_pair(self, left: bytes, right: bytes) -> bytes:
        return hash_pair(self._hasher, left, right, self._mode.sorts)


def build_tree(
    items: Iterable[bytes],
    hasher: HashFunction | None = None,
    mode: PairingMode | str | None = None,
) -> MerkleTree:
    """
    Build a Merkle tree from raw items.

    Args:
        items: Ordered input items as bytes
        hasher: Digest function (defaults to the configured one)
        mode: Pairing mode (defaults to the configured one)

    Returns:
        Built MerkleTree

    Raises:
        EmptyInputError: If ``items`` is empty
    """
    return TreeBuilder(hasher=hasher, mode=mode).build(items)


def build_tree_from_leaves(
    leaves: Sequence[bytes],
    hasher: HashFunction | None = None,
    mode: PairingMode | str | None = None,
) -> MerkleTree:
    """Build a Merkle tree from pre-hashed leaf digests."""
    return TreeBuilder(hasher=hasher, mode=mode).build_from_leaves(leaves)
