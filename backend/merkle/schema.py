"""
Merkle Whitelist Proof Schema.

Pydantic models validating serialized proofs before they
become Proof values.
Requires Python 3.11+.
"""

from typing import Any

from eth_utils import decode_hex
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from merkle.errors import MalformedProofError
from merkle.models import Proof, ProofStep, Side


def _parse_hex(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if not isinstance(value, str):
        raise ValueError("expected a hex string")
    digest = decode_hex(value)
    if not digest:
        raise ValueError("digest is empty")
    return digest


class ProofStepPayload(BaseModel):
    """A serialized proof step."""

    model_config = ConfigDict(extra="forbid")

    sibling: bytes
    side: Side

    @field_validator("sibling", mode="before")
    @classmethod
    def parse_sibling(cls, v: Any) -> bytes:
        return _parse_hex(v)


class ProofPayload(BaseModel):
    """A serialized proof."""

    model_config = ConfigDict(extra="forbid")

    leaf: bytes
    leaf_index: int | None = None
    steps: list[ProofStepPayload] = []

    @field_validator("leaf", mode="before")
    @classmethod
    def parse_leaf(cls, v: Any) -> bytes:
        return _parse_hex(v)

    def to_proof(self) -> Proof:
        """Convert into an immutable Proof, checking digest lengths agree."""
        sizes = {len(self.leaf)} | {len(step.sibling) for step in self.steps}
        if len(sizes) > 1:
            raise MalformedProofError(
                f"proof mixes digest lengths: {sorted(sizes)}"
            )
        return Proof(
            leaf=self.leaf,
            steps=tuple(ProofStep(step.sibling, step.side) for step in self.steps),
            leaf_index=self.leaf_index,
        )


def parse_proof(data: Any) -> Proof:
    """
    Parse a proof from its dictionary (or JSON string) form.

    Raises:
        MalformedProofError: If the payload fails validation
    """
    try:
        if isinstance(data, (str, bytes)):
            payload = ProofPayload.model_validate_json(data)
        else:
            payload = ProofPayload.model_validate(data)
    except ValidationError as e:
        raise MalformedProofError(f"invalid proof payload: {e.error_count()} error(s)") from e
    return payload.to_proof()
