"""
Merkle Whitelist Errors.

Exception hierarchy raised by tree building, proof generation
and proof parsing.
Requires Python 3.11+.
"""


class MerkleError(Exception):
    """Base class for all Merkle engine errors."""


class EmptyInputError(MerkleError, ValueError):
    """Raised when a tree is requested for zero leaves."""

    def __init__(self) -> None:
        super().__init__("cannot build a Merkle tree from zero leaves")


class LeafNotFoundError(MerkleError, LookupError):
    """Raised when a proof is requested for a leaf the tree does not hold."""

    def __init__(self, leaf: bytes | int) -> None:
        self.leaf = leaf
        if isinstance(leaf, int):
            detail = f"leaf index {leaf} out of range"
        else:
            detail = f"leaf 0x{bytes(leaf).hex()} not in tree"
        super().__init__(detail)


class MalformedProofError(MerkleError, ValueError):
    """Raised when a proof (or its serialized form) is structurally invalid."""


class LengthMismatchError(MalformedProofError):
    """A digest does not have the hash function's output length."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} is {actual} bytes, expected {expected}")


class UnsupportedHashError(MerkleError, ValueError):
    """Raised for an unknown hash algorithm name."""
