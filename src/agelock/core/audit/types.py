"""Audit records for secret resolutions."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class AuditAction(str, Enum):
    """How a resolution ended."""

    SECRET_CACHE_HIT = "secret_cache_hit"
    SECRET_DECRYPTED = "secret_decrypted"
    SECRET_RESOLUTION_FAILED = "secret_resolution_failed"


class AuditStatus(str, Enum):
    """Whether the resolved secret was hash-locked."""

    PINNED = "pinned"
    UNPINNED = "unpinned"
    FAILED = "failed"


@dataclass(frozen=True)
class AuditEvent:
    """One resolution, as recorded in the audit trail.

    Only paths, hashes and error names are recorded. Plaintext has no field
    here and so can never reach a sink.

    Args:
        action: How the resolution ended.
        caller: Name the resolver reported as (e.g. ``agelock.read_secret``).
        file: The encrypted file.
        status: Pinned, unpinned or failed.
        store_path: Resulting store path, on success.
        content_hash: SRI digest of the plaintext, on success.
        hash_outcome: Verification outcome, when the plaintext was hashed.
        error: Exception class name, on failure.
        operation: Resolution step that failed.
        timestamp: UTC time the event was created.
    """

    action: AuditAction
    caller: str
    file: str
    status: AuditStatus
    store_path: str | None = None
    content_hash: str | None = None
    hash_outcome: str | None = None
    error: str | None = None
    operation: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form; unset optional fields are left out."""
        record = {k: v for k, v in asdict(self).items() if v is not None}
        record["action"] = self.action.value
        record["status"] = self.status.value
        record["timestamp"] = self.timestamp.isoformat()
        return record
