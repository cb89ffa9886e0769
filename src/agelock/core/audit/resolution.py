"""Audit-aware wrapper for secret resolution."""

from __future__ import annotations

import logging

from agelock.core.audit.sinks import AuditSink
from agelock.core.audit.types import AuditAction, AuditEvent, AuditStatus
from agelock.core.resolution.exceptions import ResolutionError
from agelock.core.resolution.resolver import SecretResolver
from agelock.core.resolution.types import ResolvedSecret, SecretReference
from agelock.core.store.base import ContentStore
from agelock.core.utils import safe_call

logger = logging.getLogger(__name__)


class ResolutionAuditLogger:
    """Decorator that emits an audit event for every ``resolve()`` call.

    The event records the encrypted file, the store path and the content
    hash.  The plaintext is never included.  Resolution errors are
    audited and then re-raised unchanged.

    Args:
        resolver: The resolver to delegate to.
        sink: Audit sink that receives the events.
    """

    def __init__(self, resolver: SecretResolver, sink: AuditSink) -> None:
        self._resolver = resolver
        self._sink = sink

    @property
    def resolver(self) -> SecretResolver:
        return self._resolver

    @property
    def store(self) -> ContentStore:
        return self._resolver.store

    @property
    def who(self) -> str:
        return self._resolver.who

    def with_caller(self, who: str) -> ResolutionAuditLogger:
        return ResolutionAuditLogger(self._resolver.with_caller(who), self._sink)

    def close(self) -> None:
        """Close the underlying sink."""
        self._sink.close()

    def resolve(self, reference: SecretReference) -> ResolvedSecret:
        """Resolve a secret and emit an audit event."""
        try:
            result = self._resolver.resolve(reference)
        except ResolutionError as exc:
            self._emit(
                reference,
                AuditEvent(
                    action=AuditAction.SECRET_RESOLUTION_FAILED,
                    caller=self.who,
                    file=str(reference.encrypted_path),
                    status=AuditStatus.FAILED,
                    error=type(exc).__name__,
                    operation=exc.operation,
                ),
            )
            raise

        self._emit(
            reference,
            AuditEvent(
                action=AuditAction.SECRET_CACHE_HIT if result.cached else AuditAction.SECRET_DECRYPTED,
                caller=self.who,
                file=str(reference.encrypted_path),
                status=AuditStatus.PINNED if reference.expected_hash is not None else AuditStatus.UNPINNED,
                store_path=str(result.path),
                content_hash=result.hash.to_sri(),
                hash_outcome=result.outcome.kind.value if result.outcome is not None else None,
            ),
        )
        return result

    def _emit(self, reference: SecretReference, event: AuditEvent) -> None:
        safe_call(
            lambda: self._sink.emit(event),
            logger,
            "Failed to emit audit event for %s",
            reference.encrypted_path,
        )
