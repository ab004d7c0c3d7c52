#!/usr/bin/env python3
"""
Merkle Whitelist Proof Script.

Builds a Merkle tree over a whitelist file and prints the root
and every proof, or verifies a single proof against a root.
Requires Python 3.11+.

Usage:
    python scripts/whitelist_proofs.py build whitelist.txt > proofs.json
    python scripts/whitelist_proofs.py verify 0x<root> 0x<address> proof.json

Exit status: 0 included / built, 1 not included, 2 bad input.
"""

import argparse
import json
import sys
from pathlib import Path

from eth_utils import decode_hex, is_hex_address, to_canonical_address, to_checksum_address

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from merkle import (
    MalformedProofError,
    MerkleError,
    PairingMode,
    Proof,
    build_tree,
    generate_proofs,
    get_hasher,
    verify_item,
)
from utils.config import get_settings
from utils.logger import configure_logging, get_logger


configure_logging()
logger = get_logger("whitelist_proofs")


def encode_item(line: str) -> bytes:
    """Hex addresses become their 20 raw bytes, anything else its UTF-8 text."""
    if is_hex_address(line):
        return to_canonical_address(line)
    return line.encode("utf-8")


def display_item(line: str) -> str:
    return to_checksum_address(line) if is_hex_address(line) else line


def read_items(path: Path) -> list[str]:
    lines = [line.strip() for line in path.read_text(encoding="utf-8").splitlines()]
    return [line for line in lines if line and not line.startswith("#")]


def cmd_build(args: argparse.Namespace) -> int:
    items = read_items(args.file)
    logger.info("whitelist_loaded", path=str(args.file), count=len(items))

    tree = build_tree(
        [encode_item(item) for item in items],
        hasher=get_hasher(args.hash),
        mode=PairingMode(args.mode),
    )
    proofs = generate_proofs(tree)

    output = {
        "root": tree.root_hex,
        "hash": tree.hasher.name,
        "mode": tree.mode.value,
        "entries": [
            {"item": display_item(item), "proof": proof.as_dict}
            for item, proof in zip(items, proofs)
        ],
    }
    print(json.dumps(output, indent=2))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    try:
        proof = Proof.from_dict(args.proof.read_text(encoding="utf-8"))
    except MalformedProofError as e:
        logger.error("proof_rejected", path=str(args.proof), error=str(e))
        return 2

    ok = verify_item(
        encode_item(args.item),
        proof,
        decode_hex(args.root),
        mode=PairingMode(args.mode),
        hasher=get_hasher(args.hash),
    )
    print(json.dumps({"item": display_item(args.item), "included": ok}))
    return 0 if ok else 1


def main(argv: list[str] | None = None) -> int:
    settings = get_settings().merkle
    default_mode = PairingMode.default().value

    parser = argparse.ArgumentParser(description="Build and check whitelist Merkle proofs")
    parser.add_argument("--hash", default=settings.hash_algorithm, choices=["sha256", "keccak256"])
    parser.add_argument(
        "--mode", default=default_mode, choices=[m.value for m in PairingMode]
    )
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Print the root and all proofs as JSON")
    build.add_argument("file", type=Path, help="One item per line")
    build.set_defaults(func=cmd_build)

    check = sub.add_parser("verify", help="Verify one item's proof against a root")
    check.add_argument("root", help="0x-prefixed root digest")
    check.add_argument("item", help="Whitelisted item, e.g. an address")
    check.add_argument("proof", type=Path, help="JSON file holding one proof")
    check.set_defaults(func=cmd_verify)

    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (MerkleError, OSError, ValueError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
