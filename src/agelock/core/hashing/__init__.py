"""Digests, their encodings, and hash verification."""

from agelock.core.hashing.digest import (
    Digest,
    DigestParseError,
    HashAlgorithm,
    nix_base32_decode,
    nix_base32_encode,
)
from agelock.core.hashing.verifier import (
    HashOutcome,
    HashOutcomeKind,
    HashVerifier,
    Matched,
    Mismatched,
    NotProvided,
    sha256_digest,
)

__all__ = [
    "Digest",
    "DigestParseError",
    "HashAlgorithm",
    "HashOutcome",
    "HashOutcomeKind",
    "HashVerifier",
    "Matched",
    "Mismatched",
    "NotProvided",
    "nix_base32_decode",
    "nix_base32_encode",
    "sha256_digest",
]
