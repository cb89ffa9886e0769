"""Fixed-output store path computation.

Flat fixed-output paths follow the Nix store scheme: the content digest
is folded into an inner ``fixed:out:`` fingerprint, which is hashed again
together with the store directory and name, compressed to 160 bits and
printed in Nix base32.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from agelock.core.hashing.digest import Digest, nix_base32_encode
from agelock.core.store.base import StorePath, validate_store_name

HASH_PART_BYTES = 20


def compress_hash(digest: bytes, size: int = HASH_PART_BYTES) -> bytes:
    """XOR-fold *digest* down to *size* bytes."""
    out = bytearray(size)
    for i, b in enumerate(digest):
        out[i % size] ^= b
    return bytes(out)


def fixed_output_fingerprint(digest: Digest) -> str:
    return f"fixed:out:{digest.to_hex(include_algorithm=True)}:"


def make_store_path(store_dir: Path, path_type: str, inner: bytes, name: str) -> StorePath:
    validate_store_name(name)
    fingerprint = f"{path_type}:sha256:{inner.hex()}:{store_dir}:{name}"
    hash_part = nix_base32_encode(compress_hash(hashlib.sha256(fingerprint.encode()).digest()))
    return StorePath(store_dir, f"{hash_part}-{name}")


def make_fixed_output_path(store_dir: Path, name: str, digest: Digest) -> StorePath:
    """Compute the flat fixed-output path for *digest* named *name*."""
    inner = hashlib.sha256(fixed_output_fingerprint(digest).encode()).digest()
    return make_store_path(store_dir, "output:out", inner, name)
