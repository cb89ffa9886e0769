"""Resolution of encrypted secrets into verified store paths."""

from agelock.core.resolution.exceptions import (
    DecryptionFailed,
    HashMismatch,
    NoUsableIdentity,
    PurityViolation,
    ResolutionError,
    SourceNotFound,
    StoreCommitFailed,
    UnsupportedHashAlgorithm,
)
from agelock.core.resolution.resolver import DEFAULT_CALLER, SecretResolver
from agelock.core.resolution.types import (
    ResolutionState,
    ResolvedSecret,
    SecretReference,
    derive_name,
)

__all__ = [
    "DEFAULT_CALLER",
    "DecryptionFailed",
    "HashMismatch",
    "NoUsableIdentity",
    "PurityViolation",
    "ResolutionError",
    "ResolutionState",
    "ResolvedSecret",
    "SecretReference",
    "SecretResolver",
    "SourceNotFound",
    "StoreCommitFailed",
    "UnsupportedHashAlgorithm",
    "derive_name",
]
