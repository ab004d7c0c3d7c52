"""
Merkle Whitelist Proof Verifier.

Recomputes a root from a leaf and its proof path and compares it
to a trusted root. Needs no access to the tree or the leaf set.
Requires Python 3.11+.
"""

import hmac
from collections.abc import Iterable, Sequence

from merkle.errors import LengthMismatchError, MalformedProofError
from merkle.hashing import HashFunction, default_hasher, hash_item, hash_pair
from merkle.models import PairingMode, Proof, ProofStep, Side
from utils.logger import LoggerMixin, get_logger

ProofLike = Proof | Sequence[ProofStep] | Sequence[bytes]

logger = get_logger("merkle.proof_verifier")


class ProofVerifier(LoggerMixin):
    """
    Checks inclusion proofs against a trusted root.

    Mode and hash function must match the ones the tree was built with.
    """

    def __init__(
        self,
        hasher: HashFunction | None = None,
        mode: PairingMode | str | None = None,
    ) -> None:
        """
        Initialize the verifier.

        Raises:
            MalformedProofError: If ``mode`` names no pairing mode
        """
        self._hasher = hasher or default_hasher()
        try:
            self._mode = PairingMode.resolve(mode)
        except ValueError:
            raise MalformedProofError(f"unknown pairing mode {mode!r}") from None

    def verify(self, leaf: bytes, proof: ProofLike, root: bytes) -> bool:
        """
        Check that ``leaf`` is included under ``root``.

        Malformed input is logged and reported as ``False``.

        Args:
            leaf: Candidate leaf digest
            proof: Proof, sequence of ProofSteps, or raw sibling digests (sorted mode)
            root: Trusted root digest

        Returns:
            True iff the recomputed root equals ``root`` byte for byte
        """
        try:
            return self.verify_strict(leaf, proof, root)
        except MalformedProofError as e:
            self.log.warning("proof_malformed", error=str(e), mode=self._mode.value)
            return False

    def verify_strict(self, leaf: bytes, proof: ProofLike, root: bytes) -> bool:
        """
        Same as :meth:`verify` but raises on malformed input.

        Raises:
            MalformedProofError: If leaf, root or any step is malformed
        """
        current = self._check_digest("leaf", leaf)
        expected = self._check_digest("root", root)
        sort = self._mode.sorts

        for step in self._steps(proof):
            if sort or step.side is Side.RIGHT:
                current = hash_pair(self._hasher, current, step.sibling, sort)
            else:
                current = hash_pair(self._hasher, step.sibling, current, sort)

        return hmac.compare_digest(current, expected)

    def verify_item(self, item: bytes, proof: ProofLike, root: bytes) -> bool:
        """Hash a raw input item and verify it; non-bytes items are ``False``."""
        try:
            leaf = hash_item(self._hasher, item)
        except TypeError as e:
            self.log.warning("item_rejected", error=str(e))
            return False
        return self.verify(leaf, proof, root)

    def _check_digest(self, what: str, value: object) -> bytes:
        if not isinstance(value, (bytes, bytearray)):
            raise MalformedProofError(f"{what} must be bytes, got {type(value).__name__}")
        if len(value) != self._hasher.digest_size:
            raise LengthMismatchError(what, self._hasher.digest_size, len(value))
        return bytes(value)

    def _steps(self, proof: ProofLike) -> list[ProofStep]:
        """Normalize and validate the proof's steps."""
        raw = proof.steps if isinstance(proof, Proof) else proof
        if isinstance(raw, (bytes, bytearray, str)) or not isinstance(raw, Iterable):
            raise MalformedProofError("proof must be a sequence of steps, not a single value")

        steps: list[ProofStep] = []
        for i, step in enumerate(raw):
            if isinstance(step, ProofStep):
                if not isinstance(step.side, Side):
                    raise MalformedProofError(f"step {i} has invalid side {step.side!r}")
                sibling = self._check_digest(f"step {i} sibling", step.sibling)
                steps.append(ProofStep(sibling, step.side))
            elif isinstance(step, (bytes, bytearray)):
                # Bare siblings carry no side, so only commutative hashing can use them
                if not self._mode.sorts:
                    raise MalformedProofError(
                        f"step {i} has no side; positional proofs need ProofSteps"
                    )
                steps.append(ProofStep(self._check_digest(f"step {i} sibling", step), Side.RIGHT))
            else:
                raise MalformedProofError(f"step {i} has unsupported type {type(step).__name__}")
        return steps


def _verifier(
    hasher: HashFunction | None, mode: PairingMode | str | None
) -> ProofVerifier | None:
    try:
        return ProofVerifier(hasher=hasher, mode=mode)
    except MalformedProofError as e:
        logger.warning("proof_malformed", error=str(e))
        return None


def verify(
    leaf: bytes,
    proof: ProofLike,
    root: bytes,
    mode: PairingMode | str | None = None,
    hasher: HashFunction | None = None,
) -> bool:
    """
    Check a leaf digest's inclusion proof against a trusted root.

    Returns ``False`` for a mismatch and for malformed input;
    never raises for either.
    """
    verifier = _verifier(hasher, mode)
    return verifier is not None and verifier.verify(leaf, proof, root)


def verify_item(
    item: bytes,
    proof: ProofLike,
    root: bytes,
    mode: PairingMode | str | None = None,
    hasher: HashFunction | None = None,
) -> bool:
    """Check a raw (unhashed) item's inclusion proof against a trusted root."""
    verifier = _verifier(hasher, mode)
    return verifier is not None and verifier.verify_item(item, proof, root)


def verify_strict(
    leaf: bytes,
    proof: ProofLike,
    root: bytes,
    mode: PairingMode | str | None = None,
    hasher: HashFunction | None = None,
) -> bool:
    """
    Like :func:`verify`, but raises for malformed input.

    Raises:
        MalformedProofError: If leaf, root or any step is malformed
    """
    return ProofVerifier(hasher=hasher, mode=mode).verify_strict(leaf, proof, root)
