"""Discovery of age identity files.

An explicit override names the only candidate.  Without one, the default
SSH keys under the user's home directory are tried in a fixed order.
Discovery only probes the filesystem and never raises; an empty
``usable`` list is for the caller to report.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

IDENTITY_ENV_VAR = "AGE_IDENTITY_FILE"
"""Environment variable naming a single identity file."""

DEFAULT_IDENTITY_NAMES: tuple[str, ...] = ("id_ed25519", "id_rsa")
"""Default key files under ``~/.ssh``, in the order they are tried."""


class CandidateStatus(str, Enum):
    """Availability of an identity candidate."""

    FOUND = "found"
    NOT_FOUND = "not found"
    NOT_READABLE = "not readable"
    INACCESSIBLE = "inaccessible"


@dataclass(frozen=True)
class IdentityCandidate:
    """A possible identity file and what was found at its path.

    Args:
        path: Candidate identity path.
        status: Result of probing the path.
    """

    path: Path
    status: CandidateStatus

    @property
    def exists(self) -> bool:
        return self.status in (CandidateStatus.FOUND, CandidateStatus.NOT_READABLE)

    @property
    def readable(self) -> bool:
        return self.status is CandidateStatus.FOUND

    def describe(self) -> str:
        return f"{self.path} ({self.status.value})"


@dataclass
class IdentityDiscovery:
    """Result of one discovery pass."""

    candidates: list[IdentityCandidate] = field(default_factory=list)
    home_resolved: bool = True

    @property
    def usable(self) -> list[Path]:
        """Readable candidate paths, in candidate order."""
        return [c.path for c in self.candidates if c.readable]

    def describe(self) -> str:
        """Summarise every candidate for an error message."""
        if not self.candidates:
            return "no candidate paths (could not determine home directory)"
        return "checked: " + ", ".join(c.describe() for c in self.candidates)


def probe(path: Path) -> CandidateStatus:
    """Classify *path* without opening it."""
    try:
        if not path.exists():
            return CandidateStatus.NOT_FOUND
        if not os.access(path, os.R_OK):
            return CandidateStatus.NOT_READABLE
        return CandidateStatus.FOUND
    except OSError:
        return CandidateStatus.INACCESSIBLE


class IdentityResolver:
    """Produces identity candidates for decryption.

    Args:
        identity_file: Explicit identity path. When set, the default
            locations are not consulted.
        home: Home directory used for the default locations. ``None``
            means it could not be determined.
    """

    def __init__(
        self,
        identity_file: str | Path | None = None,
        home: str | Path | None = None,
    ) -> None:
        self._identity_file = Path(identity_file) if identity_file else None
        self._home = Path(home) if home else None

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> IdentityResolver:
        """Build a resolver from ``AGE_IDENTITY_FILE`` and ``HOME``."""
        env = os.environ if environ is None else environ
        # An empty AGE_IDENTITY_FILE is treated as unset, not as an empty path.
        return cls(identity_file=env.get(IDENTITY_ENV_VAR) or None, home=env.get("HOME") or None)

    def candidate_paths(self) -> list[Path]:
        if self._identity_file is not None:
            return [self._identity_file]
        if self._home is None:
            return []
        return [self._home / ".ssh" / name for name in DEFAULT_IDENTITY_NAMES]

    def discover(self) -> IdentityDiscovery:
        """Probe every candidate path."""
        paths = self.candidate_paths()
        discovery = IdentityDiscovery(
            candidates=[IdentityCandidate(p, probe(p)) for p in paths],
            home_resolved=self._identity_file is not None or self._home is not None,
        )
        logger.debug("Identity discovery: %s", discovery.describe())
        return discovery
