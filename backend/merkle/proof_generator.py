"""
Merkle Whitelist Proof Generator.

Extracts the sibling path from a leaf up to the root of a built tree.
Requires Python 3.11+.
"""

from merkle.models import MerkleTree, Proof, ProofStep, Side
from utils.logger import LoggerMixin


class ProofGenerator(LoggerMixin):
    """
    Generates inclusion proofs from a built tree.

    The tree is only read, so one generator can serve
    concurrent callers.
    """

    def __init__(self, tree: MerkleTree) -> None:
        self._tree = tree

    @property
    def tree(self) -> MerkleTree:
        return self._tree

    def proof(self, leaf: bytes | int) -> Proof:
        """
        Build the proof for one leaf.

        Args:
            leaf: Leaf digest, or index into the original input order

        Returns:
            Proof with steps in leaf-to-root order

        Raises:
            LeafNotFoundError: If the leaf is not in the tree
        """
        position = self._tree.position_of(leaf)
        digest = self._tree.layers[0][position]
        leaf_index = leaf if isinstance(leaf, int) else self._tree.index_of(digest)

        steps: list[ProofStep] = []
        for layer in self._tree.layers[:-1]:
            sibling = position ^ 1
            # No sibling means the digest was carried up; no step for this layer
            if sibling < len(layer):
                side = Side.LEFT if sibling < position else Side.RIGHT
                steps.append(ProofStep(layer[sibling], side))
            position //= 2

        self.log.debug("proof_generated", leaf_index=leaf_index, steps=len(steps))
        return Proof(leaf=digest, steps=tuple(steps), leaf_index=leaf_index)

    def proof_for_item(self, item: bytes) -> Proof:
        """
        Hash a raw input item and build its proof.

        Raises:
            TypeError: If the item is not bytes-like
            LeafNotFoundError: If the item is not in the tree
        """
        return self.proof(self._tree.hash_leaf(item))

    def all_proofs(self) -> list[Proof]:
        """Proofs for every leaf, in original input order."""
        return [self.proof(index) for index in range(self._tree.leaf_count)]


def generate_proof(tree: MerkleTree, leaf: bytes | int) -> Proof:
    """
    Generate the inclusion proof for a leaf digest or input index.

    Raises:
        LeafNotFoundError: If the leaf is not in the tree
    """
    return ProofGenerator(tree).proof(leaf)


def generate_proof_for_item(tree: MerkleTree, item: bytes) -> Proof:
    """Generate the inclusion proof for a raw (unhashed) input item."""
    return ProofGenerator(tree).proof_for_item(item)


def generate_proofs(tree: MerkleTree) -> list[Proof]:
    """Generate proofs for every leaf, in original input order."""
    return ProofGenerator(tree).all_proofs()
