"""
Merkle Whitelist Merkle Tree Package.

Tree construction, inclusion proofs and proof verification
for set-membership checks.
Requires Python 3.11+.
"""

from merkle.errors import (
    EmptyInputError,
    LeafNotFoundError,
    LengthMismatchError,
    MalformedProofError,
    MerkleError,
    UnsupportedHashError,
)
from merkle.hashing import (
    HashFunction,
    Keccak256Hasher,
    Sha256Hasher,
    default_hasher,
    get_hasher,
    hash_item,
)
from merkle.models import MerkleTree, PairingMode, Proof, ProofStep, Side
from merkle.proof_generator import (
    ProofGenerator,
    generate_proof,
    generate_proof_for_item,
    generate_proofs,
)
from merkle.proof_verifier import ProofVerifier, verify, verify_item, verify_strict
from merkle.tree_builder import TreeBuilder, build_tree, build_tree_from_leaves

__all__ = [
    "EmptyInputError",
    "LeafNotFoundError",
    "LengthMismatchError",
    "MalformedProofError",
    "MerkleError",
    "UnsupportedHashError",
    "HashFunction",
    "Keccak256Hasher",
    "Sha256Hasher",
    "default_hasher",
    "get_hasher",
    "hash_item",
    "MerkleTree",
    "PairingMode",
    "Proof",
    "ProofStep",
    "Side",
    "ProofGenerator",
    "generate_proof",
    "generate_proof_for_item",
    "generate_proofs",
    "ProofVerifier",
    "verify",
    "verify_item",
    "verify_strict",
    "TreeBuilder",
    "build_tree",
    "build_tree_from_leaves",
]
