"""Secret resolution errors.

Every error names the caller and the encrypted file, so its message can
be shown to the user as is.  None of them is retried.
"""

from __future__ import annotations

from pathlib import Path

from agelock.core.hashing.digest import Digest, HashAlgorithm
from agelock.core.hashing.verifier import Mismatched
from agelock.core.identity.discovery import IDENTITY_ENV_VAR, IdentityCandidate, IdentityDiscovery


class ResolutionError(Exception):
    """Base exception for failed resolutions.

    Args:
        file: The encrypted file being resolved.
        operation: The resolution step that failed.
        message: Complete user-facing message.
    """

    def __init__(self, file: Path, operation: str, message: str) -> None:
        self.file = file
        self.operation = operation
        super().__init__(message)


class UnsupportedHashAlgorithm(ResolutionError):
    """The expected hash uses an algorithm other than SHA-256."""

    def __init__(self, who: str, file: Path, algorithm: HashAlgorithm) -> None:
        self.algorithm = algorithm
        super().__init__(
            file,
            "cache_check",
            f"{who} only supports SHA-256 hashes, got {algorithm.value} for '{file}'",
        )


class PurityViolation(ResolutionError):
    """No hash was given while pure evaluation is required."""

    def __init__(self, who: str, file: Path) -> None:
        super().__init__(
            file,
            "purity_gate",
            f"{who} requires 'hash' in pure evaluation mode (resolving '{file}'). "
            "Run without pure mode for first-time decryption, "
            "then add the printed hash to your configuration.",
        )


class NoUsableIdentity(ResolutionError):
    """No identity candidate can be read."""

    def __init__(self, who: str, file: Path, discovery: IdentityDiscovery, hash_locked: bool) -> None:
        self.candidates: list[IdentityCandidate] = list(discovery.candidates)
        message = (
            f"{who}: no usable identity found for '{file}'. {discovery.describe()}. "
            f"Set {IDENTITY_ENV_VAR} or ensure a key exists at a default path."
        )
        if hash_locked:
            message += (
                " The hash-locked store path is not present and no identity was found to decrypt."
                " You may need to run an initial impure resolution on a machine with the identity,"
                " or populate the store path from a substituter."
            )
        super().__init__(file, "identity_discovery", message)


class SourceNotFound(ResolutionError):
    """The encrypted file does not exist."""

    def __init__(self, who: str, file: Path) -> None:
        super().__init__(
            file,
            "decrypt",
            f"{who}: file '{file}' does not exist. "
            "If it lives in a git repository, ensure the file has been added to git.",
        )


class DecryptionFailed(ResolutionError):
    """The decryption tool reported an error.

    ``diagnostic`` holds the tool's output verbatim.
    """

    def __init__(self, who: str, file: Path, diagnostic: str) -> None:
        self.diagnostic = diagnostic
        super().__init__(file, "decrypt", f"{who}: age failed to decrypt '{file}': {diagnostic}")


class HashMismatch(ResolutionError):
    """The decrypted content does not hash to the expected digest."""

    def __init__(self, who: str, file: Path, outcome: Mismatched) -> None:
        self.expected: Digest = outcome.expected
        self.actual: Digest = outcome.actual
        super().__init__(
            file,
            "verify",
            f"{who}: hash mismatch for '{file}'.\n"
            f"{outcome.describe()}\n"
            "(did you update the encrypted file without updating the hash?)",
        )


class StoreCommitFailed(ResolutionError):
    """The verified plaintext could not be written to the store.

    ``reason`` holds the underlying store or filesystem error text.
    """

    def __init__(self, who: str, file: Path, reason: str) -> None:
        self.reason = reason
        super().__init__(
            file,
            "commit",
            f"{who}: cannot add the decrypted contents of '{file}' to the store: {reason}",
        )
