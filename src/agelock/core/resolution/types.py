"""Inputs, outputs and states of a secret resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from agelock.core.hashing.digest import Digest
from agelock.core.hashing.verifier import HashOutcome
from agelock.core.store.base import StorePath, validate_store_name

AGE_SUFFIX = ".age"
FALLBACK_NAME = "source"


def derive_name(path: Path) -> str:
    """Store name for *path*: its base name without a trailing ``.age``."""
    base = path.name or FALLBACK_NAME
    if base.endswith(AGE_SUFFIX):
        base = base[: -len(AGE_SUFFIX)]
    return base


@dataclass(frozen=True)
class SecretReference:
    """Reference to an encrypted file, optionally pinned to a content hash.

    Args:
        encrypted_path: Path to the ciphertext.
        expected_hash: Digest the plaintext must have, if known.
        derived_name: Name used for the store path.
    """

    encrypted_path: Path
    expected_hash: Digest | None
    derived_name: str

    @classmethod
    def create(cls, encrypted_path: str | Path, expected_hash: Digest | None = None) -> SecretReference:
        """Build a reference, deriving and validating the store name.

        Raises:
            InvalidStoreName: If the derived name is not a legal store name.
        """
        path = Path(encrypted_path)
        return cls(path, expected_hash, validate_store_name(derive_name(path)))


@dataclass(frozen=True)
class ResolvedSecret:
    """A verified secret committed to the content store.

    Args:
        path: Store path holding the plaintext.
        hash: Digest of the plaintext.
        outcome: Hash verification outcome; ``None`` for cache hits,
            which never see the plaintext.
        cached: Whether the path was satisfied without decryption.
    """

    path: StorePath
    hash: Digest
    outcome: HashOutcome | None = None
    cached: bool = False

    def read_bytes(self) -> bytes:
        return self.path.path.read_bytes()


class ResolutionState(str, Enum):
    """States of the cache-or-decrypt state machine."""

    CACHE_CHECK = "cache_check"
    PURITY_GATE = "purity_gate"
    IDENTITY_DISCOVERY = "identity_discovery"
    DECRYPT = "decrypt"
    VERIFY = "verify"
    COMMIT = "commit"
    CACHED_HIT = "cached_hit"
    DONE = "done"


TERMINAL_STATES = frozenset({ResolutionState.DONE})
