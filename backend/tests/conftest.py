"""
Merkle Whitelist Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

from collections.abc import Generator

import pytest

from merkle.hashing import HashFunction, Keccak256Hasher, Sha256Hasher
from utils.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from the caller's MERKLE_* environment."""
    for name in (
        "MERKLE_HASH_ALGORITHM",
        "MERKLE_SORTED_PAIRS",
        "MERKLE_PARALLEL_THRESHOLD",
        "MERKLE_MAX_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sha256() -> HashFunction:
    return Sha256Hasher()


@pytest.fixture
def keccak256() -> HashFunction:
    return Keccak256Hasher()


@pytest.fixture(params=["sha256", "keccak256"])
def hasher(request: pytest.FixtureRequest) -> HashFunction:
    """Each supported hash function."""
    return Sha256Hasher() if request.param == "sha256" else Keccak256Hasher()


@pytest.fixture
def abcd() -> list[bytes]:
    """The four-item set used across proof tests."""
    return [b"a", b"b", b"c", b"d"]


@pytest.fixture
def whitelist() -> list[bytes]:
    """Twenty-byte address items, as a whitelist loader would hand them over."""
    return [bytes([i]) * 20 for i in range(1, 12)]
