"""Comparison of decrypted content hashes against expected digests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from agelock.core.hashing.digest import Digest, HashAlgorithm

SUPPORTED_ALGORITHM = HashAlgorithm.SHA256


class HashOutcomeKind(str, Enum):
    """Outcome of a hash verification."""

    MATCHED = "matched"
    MISMATCHED = "mismatched"
    NOT_PROVIDED = "not_provided"


@dataclass(frozen=True)
class Matched:
    actual: Digest
    kind: HashOutcomeKind = HashOutcomeKind.MATCHED


@dataclass(frozen=True)
class Mismatched:
    """The content hash disagrees with the expected one.

    Only digests are held here; :meth:`describe` is safe to show to users.
    """

    expected: Digest
    actual: Digest
    kind: HashOutcomeKind = HashOutcomeKind.MISMATCHED

    def describe(self) -> str:
        return f"  specified: {self.expected.to_sri()}\n  got:       {self.actual.to_sri()}"


@dataclass(frozen=True)
class NotProvided:
    """No expected hash was given; ``actual`` is what should be pinned."""

    actual: Digest
    kind: HashOutcomeKind = HashOutcomeKind.NOT_PROVIDED


HashOutcome = Matched | Mismatched | NotProvided


def sha256_digest(content: bytes) -> Digest:
    """Compute the SHA-256 digest of *content*."""
    return Digest.of(content, SUPPORTED_ALGORITHM)


class HashVerifier:
    """Checks expected digests and compares them with computed ones."""

    supported = SUPPORTED_ALGORITHM

    def is_supported(self, expected: Digest) -> bool:
        return expected.algorithm is self.supported

    def verify(self, expected: Digest | None, actual: Digest) -> HashOutcome:
        """Compare *actual* against *expected*.

        Args:
            expected: The pinned digest, or ``None`` if the caller gave none.
            actual: Digest computed from the decrypted content.

        Returns:
            :class:`Matched`, :class:`Mismatched` or :class:`NotProvided`.
        """
        if expected is None:
            return NotProvided(actual)
        if expected.algorithm is actual.algorithm and expected.value == actual.value:
            return Matched(actual)
        return Mismatched(expected, actual)
