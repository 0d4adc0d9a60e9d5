"""Keccak-256 hash primitive.

Ethereum hashes with the original Keccak submission, whose padding byte is
0x01. ``hashlib.sha3_256`` uses the FIPS 202 padding (0x06) and yields
different digests, so the primitive comes from pycryptodome.
"""
from __future__ import annotations

import logging
from typing import Dict, Sequence

from Crypto.Hash import keccak

logger = logging.getLogger(__name__)

CANONICAL_VECTORS: Sequence[Dict[str, str]] = (
    {
        "name": "empty",
        "input_hex": "",
        "digest_hex": "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470",
    },
    {
        "name": "abc",
        "input_hex": "616263",
        "digest_hex": "4e03657aea45a94fc7d47ba826c8d667c0d1e6e33a64a036ec44f58fa12d6c45",
    },
    {
        "name": "quickfox",
        "input_hex": "54686520717569636b2062726f776e20666f78206a756d7073206f76657220746865206c617a7920646f67",
        "digest_hex": "4d741b6f1eb29cb2a9b9911c82f56fa8d73b04959d3d9d222895df6c0b28aa15",
    },
)


def keccak256(data: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of *data*."""
    return keccak.new(digest_bits=256, data=data).digest()


def keccak256_hex(data: bytes) -> str:
    return keccak256(data).hex()


def run_self_test() -> int:
    """Check the backend against the known digests.

    Returns the number of vectors checked. Raises ``RuntimeError`` naming the
    first vector whose digest differs.
    """
    for vector in CANONICAL_VECTORS:
        digest = keccak256_hex(bytes.fromhex(vector["input_hex"]))
        if digest != vector["digest_hex"]:
            raise RuntimeError(
                f"Keccak-256 self-test failed for {vector['name']}: "
                f"{digest} != {vector['digest_hex']}"
            )
        logger.debug("keccak vector %s ok", vector["name"])
    return len(CANONICAL_VECTORS)
