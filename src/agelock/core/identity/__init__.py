"""Identity discovery for age decryption."""

from agelock.core.identity.discovery import (
    DEFAULT_IDENTITY_NAMES,
    IDENTITY_ENV_VAR,
    CandidateStatus,
    IdentityCandidate,
    IdentityDiscovery,
    IdentityResolver,
)

__all__ = [
    "DEFAULT_IDENTITY_NAMES",
    "IDENTITY_ENV_VAR",
    "CandidateStatus",
    "IdentityCandidate",
    "IdentityDiscovery",
    "IdentityResolver",
]
