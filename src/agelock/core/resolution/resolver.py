"""Cache-or-decrypt resolution of encrypted secrets.

:class:`SecretResolver` drives an explicit state machine::

    CACHE_CHECK -> PURITY_GATE -> IDENTITY_DISCOVERY -> DECRYPT -> VERIFY -> COMMIT -> DONE
         |
         +-> CACHED_HIT -> DONE

Any state may fail by raising a :class:`ResolutionError`.  Content is
committed to the store only after verification succeeds.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from agelock.core.decrypt.base import Decryptor, DecryptorError
from agelock.core.hashing.digest import Digest
from agelock.core.hashing.verifier import HashOutcome, HashVerifier, Mismatched, NotProvided, sha256_digest
from agelock.core.identity.discovery import IdentityDiscovery, IdentityResolver
from agelock.core.metrics.registry import (
    CACHE_HITS,
    CACHE_MISSES,
    DECRYPT_DURATION,
    DECRYPTIONS,
    RESOLUTION_FAILURES,
    MeterRegistry,
)
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
from agelock.core.resolution.types import (
    TERMINAL_STATES,
    ResolutionState,
    ResolvedSecret,
    SecretReference,
)
from agelock.core.store.base import ContentStore, StoreError, StorePath
from agelock.core.utils import safe_call

logger = logging.getLogger("agelock.resolver")

DEFAULT_CALLER = "agelock.resolve"


@dataclass
class _Run:
    """Mutable scratch state for one ``resolve`` call."""

    reference: SecretReference
    discovery: IdentityDiscovery | None = None
    plaintext: bytes | None = None
    outcome: HashOutcome | None = None
    cached_path: StorePath | None = None
    result: ResolvedSecret | None = None

    @property
    def file(self) -> Path:
        return self.reference.encrypted_path


class SecretResolver:
    """Resolve :class:`SecretReference` objects into store paths.

    Args:
        store: Content store that receives verified plaintext.
        decryptor: Decryption backend.
        identities: Identity discovery, configured by the caller.
        pure_mode: Refuse to decrypt references that carry no hash.
        metrics: Optional registry for cache and decryption metrics.
        who: Caller name prefixed to error messages.
    """

    def __init__(
        self,
        store: ContentStore,
        decryptor: Decryptor,
        identities: IdentityResolver,
        *,
        pure_mode: bool = False,
        metrics: MeterRegistry | None = None,
        who: str = DEFAULT_CALLER,
    ) -> None:
        self._store = store
        self._decryptor = decryptor
        self._identities = identities
        self._pure_mode = pure_mode
        self._metrics = metrics
        self._who = who
        self._verifier = HashVerifier()
        self._handlers: dict[ResolutionState, Callable[[_Run], ResolutionState]] = {
            ResolutionState.CACHE_CHECK: self._cache_check,
            ResolutionState.PURITY_GATE: self._purity_gate,
            ResolutionState.IDENTITY_DISCOVERY: self._discover_identities,
            ResolutionState.DECRYPT: self._decrypt,
            ResolutionState.VERIFY: self._verify,
            ResolutionState.COMMIT: self._commit,
            ResolutionState.CACHED_HIT: self._cached_hit,
        }

    @property
    def store(self) -> ContentStore:
        return self._store

    @property
    def pure_mode(self) -> bool:
        return self._pure_mode

    @property
    def who(self) -> str:
        return self._who

    def with_caller(self, who: str) -> SecretResolver:
        """Return a resolver sharing this one's collaborators but reporting as *who*."""
        return SecretResolver(
            self._store,
            self._decryptor,
            self._identities,
            pure_mode=self._pure_mode,
            metrics=self._metrics,
            who=who,
        )

    def resolve_path(self, encrypted_path: str | Path, expected_hash: Digest | str | None = None) -> ResolvedSecret:
        """Resolve *encrypted_path*, parsing *expected_hash* if it is a string."""
        if isinstance(expected_hash, str):
            expected_hash = Digest.parse_optional(expected_hash)
        return self.resolve(SecretReference.create(encrypted_path, expected_hash))

    def resolve(self, reference: SecretReference) -> ResolvedSecret:
        """Resolve *reference* to verified plaintext in the store.

        Raises:
            ResolutionError: If the secret cannot be resolved.
        """
        run = _Run(reference)
        state = ResolutionState.CACHE_CHECK
        try:
            while state not in TERMINAL_STATES:
                logger.debug("Resolving '%s': %s", run.file, state.value)
                state = self._handlers[state](run)
        except ResolutionError as exc:
            self._count(RESOLUTION_FAILURES, {"error": type(exc).__name__})
            raise
        assert run.result is not None
        return run.result

    def _cache_check(self, run: _Run) -> ResolutionState:
        expected = run.reference.expected_hash
        if expected is None:
            return ResolutionState.PURITY_GATE
        if not self._verifier.is_supported(expected):
            raise UnsupportedHashAlgorithm(self._who, run.file, expected.algorithm)

        path = self._store.make_fixed_output_path(run.reference.derived_name, expected)
        # ensure() may consult substituters; any failure counts as a miss.
        try:
            present = self._store.ensure(path)
        except Exception:
            logger.debug("Store lookup for %s failed", path, exc_info=True)
            present = False

        if present:
            run.cached_path = path
            return ResolutionState.CACHED_HIT
        self._count(CACHE_MISSES)
        return ResolutionState.PURITY_GATE

    def _cached_hit(self, run: _Run) -> ResolutionState:
        assert run.cached_path is not None and run.reference.expected_hash is not None
        logger.debug("Using hash-locked store path %s for '%s'", run.cached_path, run.file)
        self._count(CACHE_HITS)
        run.result = ResolvedSecret(run.cached_path, run.reference.expected_hash, cached=True)
        return ResolutionState.DONE

    def _purity_gate(self, run: _Run) -> ResolutionState:
        if run.reference.expected_hash is None and self._pure_mode:
            raise PurityViolation(self._who, run.file)
        return ResolutionState.IDENTITY_DISCOVERY

    def _discover_identities(self, run: _Run) -> ResolutionState:
        discovery = self._identities.discover()
        if not discovery.usable:
            raise NoUsableIdentity(
                self._who,
                run.file,
                discovery,
                hash_locked=run.reference.expected_hash is not None,
            )
        run.discovery = discovery
        return ResolutionState.DECRYPT

    def _decrypt(self, run: _Run) -> ResolutionState:
        assert run.discovery is not None
        if not run.file.exists():
            raise SourceNotFound(self._who, run.file)

        start = time.monotonic()
        try:
            run.plaintext = self._decryptor.decrypt(run.file, run.discovery.usable)
        except DecryptorError as exc:
            raise DecryptionFailed(self._who, run.file, exc.message) from exc
        finally:
            duration_ms = (time.monotonic() - start) * 1000
            self._record(lambda: self._metrics.timer(DECRYPT_DURATION, duration_ms))  # type: ignore[union-attr]
        self._count(DECRYPTIONS)
        return ResolutionState.VERIFY

    def _verify(self, run: _Run) -> ResolutionState:
        assert run.plaintext is not None
        outcome = self._verifier.verify(run.reference.expected_hash, sha256_digest(run.plaintext))
        if isinstance(outcome, Mismatched):
            raise HashMismatch(self._who, run.file, outcome)
        run.outcome = outcome
        return ResolutionState.COMMIT

    def _commit(self, run: _Run) -> ResolutionState:
        assert run.plaintext is not None and run.outcome is not None
        try:
            path, actual = self._store.commit(run.reference.derived_name, run.plaintext)
        except (OSError, StoreError) as exc:
            raise StoreCommitFailed(self._who, run.file, str(exc)) from exc
        if isinstance(run.outcome, NotProvided):
            logger.warning(
                "%s: hash for '%s' is:\n  hash = \"%s\";",
                self._who,
                run.file,
                actual.to_sri(),
            )
        run.result = ResolvedSecret(path, actual, run.outcome)
        return ResolutionState.DONE

    def _count(self, name: str, tags: dict[str, str] | None = None) -> None:
        self._record(lambda: self._metrics.counter(name, tags=tags))  # type: ignore[union-attr]

    def _record(self, fn: Callable[[], None]) -> None:
        if self._metrics is not None:
            safe_call(fn, logger, "Failed to record resolution metric")
