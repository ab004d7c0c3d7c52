"""
Merkle Whitelist Data Models.

Defines the tree, proof step and proof value types.
Trees and proofs are immutable once produced.

An odd layer carries its unpaired trailing digest up to the next
layer unchanged; no proof step is recorded for that layer. Tree
building and proof generation both follow this rule.

Requires Python 3.11+.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from eth_utils import encode_hex

from merkle.errors import LeafNotFoundError
from merkle.hashing import HashFunction, hash_item
from utils.config import get_settings

Digest = bytes
Layer = tuple[Digest, ...]


class PairingMode(str, Enum):
    """How leaves and pairs are ordered before hashing."""

    SORTED = "sorted"
    POSITIONAL = "positional"

    @property
    def sorts(self) -> bool:
        return self is PairingMode.SORTED

    @classmethod
    def default(cls) -> "PairingMode":
        """Mode named by the ``MERKLE_SORTED_PAIRS`` setting."""
        return cls.SORTED if get_settings().merkle.sorted_pairs else cls.POSITIONAL

    @classmethod
    def resolve(cls, mode: "PairingMode | str | None") -> "PairingMode":
        """
        Coerce a mode or its string value, falling back to the default.

        Raises:
            ValueError: If the value names no mode
        """
        if mode is None:
            return cls.default()
        return cls(mode)


class Side(str, Enum):
    """Position of a sibling relative to the running hash."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True, slots=True)
class ProofStep:
    """One sibling digest on the path from a leaf to the root."""

    sibling: Digest
    side: Side

    @property
    def as_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {"sibling": encode_hex(self.sibling), "side": self.side.value}


@dataclass(frozen=True, slots=True)
class Proof:
    """
    Inclusion proof for a single leaf.

    Steps run from the leaf layer upward and stop below the root.
    A proof carries no reference to the tree it came from.
    """

    leaf: Digest
    steps: tuple[ProofStep, ...] = ()
    leaf_index: int | None = None

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[ProofStep]:
        return iter(self.steps)

    @property
    def siblings(self) -> list[Digest]:
        """Sibling digests only, for commutative (sorted) verifiers."""
        return [step.sibling for step in self.steps]

    @property
    def hex_siblings(self) -> list[str]:
        """0x-prefixed sibling digests."""
        return [encode_hex(step.sibling) for step in self.steps]

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "leaf": encode_hex(self.leaf),
            "leaf_index": self.leaf_index,
            "steps": [step.as_dict for step in self.steps],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Proof":
        """
        Parse a serialized proof.

        Raises:
            MalformedProofError: If the payload is not a valid proof
        """
        from merkle.schema import parse_proof

        return parse_proof(data)


@dataclass(frozen=True, slots=True)
class MerkleTree:
    """
    A built Merkle tree.

    ``layers[0]`` is the leaf layer in pairing order (sorted in
    ``SORTED`` mode) and ``layers[-1]`` holds only the root.
    ``leaves`` keeps the leaf digests in original input order.
    """

    layers: tuple[Layer, ...]
    leaves: Layer
    mode: PairingMode
    hasher: HashFunction

    @property
    def root(self) -> Digest:
        return self.layers[-1][0]

    @property
    def root_hex(self) -> str:
        return encode_hex(self.root)

    @property
    def depth(self) -> int:
        """Number of layers above the leaves."""
        return len(self.layers) - 1

    @property
    def leaf_count(self) -> int:
        return len(self.leaves)

    def hash_leaf(self, item: bytes) -> Digest:
        """Digest an input item the way this tree hashed its leaves."""
        return hash_item(self.hasher, item)

    def __contains__(self, leaf: object) -> bool:
        return isinstance(leaf, (bytes, bytearray)) and bytes(leaf) in self.layers[0]

    def position_of(self, leaf: Digest | int) -> int:
        """
        Locate a leaf in the bottom layer.

        Args:
            leaf: Leaf digest, or index into the original input order

        Returns:
            Position of the leaf in ``layers[0]``

        Raises:
            LeafNotFoundError: If the leaf is absent or the index is out of range
        """
        if isinstance(leaf, int):
            if not 0 <= leaf < len(self.leaves):
                raise LeafNotFoundError(leaf)
            if not self.mode.sorts:
                return leaf
            leaf = self.leaves[leaf]

        try:
            return self.layers[0].index(bytes(leaf))
        except ValueError:
            raise LeafNotFoundError(bytes(leaf)) from None

    def index_of(self, leaf: Digest) -> int:
        """Index of a leaf digest in the original input order."""
        try:
            return self.leaves.index(bytes(leaf))
        except ValueError:
            raise LeafNotFoundError(bytes(leaf)) from None

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "root": self.root_hex,
            "hash": self.hasher.name,
            "mode": self.mode.value,
            "leaf_count": self.leaf_count,
            "depth": self.depth,
            "layers": [[encode_hex(d) for d in layer] for layer in self.layers],
        }
