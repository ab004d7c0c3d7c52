"""
Merkle Whitelist Hash Functions.

Pluggable one-way digest functions for leaves and internal nodes.
Requires Python 3.11+.
"""

import hashlib
from typing import Protocol, runtime_checkable

from eth_utils import keccak

from merkle.errors import UnsupportedHashError
from utils.config import get_settings


@runtime_checkable
class HashFunction(Protocol):
    """
    Anything that maps bytes to a fixed-length digest.

    Implementations must be deterministic and side-effect free.
    Any byte sequence, including the empty one, is valid input.
    """

    name: str
    digest_size: int

    def hash(self, data: bytes) -> bytes:
        """Return the digest of ``data``."""
        ...


class NamedHasher:
    """
    Base for the built-in hashers.

    Hashers with the same name and digest size compare equal, so
    trees built by separate instances compare equal too.
    """

    name: str
    digest_size: int

    def hash(self, data: bytes) -> bytes:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NamedHasher):
            return NotImplemented
        return (self.name, self.digest_size) == (other.name, other.digest_size)

    def __hash__(self) -> int:
        return hash((self.name, self.digest_size))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Sha256Hasher(NamedHasher):
    """SHA-256 from the standard library."""

    name = "sha256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()


class Keccak256Hasher(NamedHasher):
    """Keccak-256, the digest EVM whitelist contracts verify against."""

    name = "keccak256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return keccak(data)


_HASHERS: dict[str, type[NamedHasher]] = {
    Sha256Hasher.name: Sha256Hasher,
    Keccak256Hasher.name: Keccak256Hasher,
}


def get_hasher(name: str) -> HashFunction:
    """
    Resolve a hash function by name.

    Args:
        name: "sha256" or "keccak256" (case and dashes ignored)

    Returns:
        HashFunction instance

    Raises:
        UnsupportedHashError: If the name is unknown
    """
    key = name.strip().lower().replace("-", "")
    try:
        return _HASHERS[key]()
    except KeyError:
        raise UnsupportedHashError(f"Unknown hash algorithm: {name}") from None


def default_hasher() -> HashFunction:
    """Hash function named by the ``MERKLE_HASH_ALGORITHM`` setting."""
    return get_hasher(get_settings().merkle.hash_algorithm)


def hash_item(hasher: HashFunction, item: bytes) -> bytes:
    """
    Digest one raw input item into a leaf.

    Raises:
        TypeError: If the item is not bytes-like
    """
    if isinstance(item, str) or not isinstance(item, (bytes, bytearray, memoryview)):
        raise TypeError(
            f"leaf items must be bytes, got {type(item).__name__}; encode strings first"
        )
    return hasher.hash(bytes(item))


def hash_pair(hasher: HashFunction, left: bytes, right: bytes, sort: bool) -> bytes:
    """
    Hash two child digests into their parent.

    With ``sort`` the lexicographically smaller digest goes first,
    which makes the parent independent of child order.
    """
    if sort and right < left:
        left, right = right, left
    return hasher.hash(left + right)
