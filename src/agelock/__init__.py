"""agelock: resolve age-encrypted secrets into a content-addressed store.

Hash-locked references resolve from the store (or a substituter) without
touching the ciphertext or any identity.  Unlocked references are
decrypted, verified and committed, and their hash is printed so it can
be pinned.
"""

from agelock.core.hashing import Digest, HashAlgorithm
from agelock.core.identity import IdentityResolver
from agelock.core.resolution import ResolutionError, ResolvedSecret, SecretReference, SecretResolver
from agelock.core.store import DirectorySubstituter, LocalContentStore

__version__ = "0.1.0"

__all__ = [
    "Digest",
    "DirectorySubstituter",
    "HashAlgorithm",
    "IdentityResolver",
    "LocalContentStore",
    "ResolutionError",
    "ResolvedSecret",
    "SecretReference",
    "SecretResolver",
    "__version__",
]
