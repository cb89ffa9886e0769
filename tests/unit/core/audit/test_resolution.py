"""Tests for ResolutionAuditLogger."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from agelock.core.audit.resolution import ResolutionAuditLogger
from agelock.core.audit.sinks import AuditSink
from agelock.core.audit.types import AuditAction, AuditEvent, AuditStatus
from agelock.core.hashing.verifier import sha256_digest
from agelock.core.resolution.exceptions import HashMismatch, StoreCommitFailed
from agelock.core.resolution.types import SecretReference
from tests.factories import FakeDecryptor, make_resolver, write_ciphertext, write_identity

PLAINTEXT = b"audited secret"


class RecordingSink(AuditSink):
    def __init__(self) -> None:
        self.events: list[AuditEvent] = []
        self.closed = False

    def emit(self, event: AuditEvent) -> None:
        self.events.append(event)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def setup(tmp_path: Path) -> tuple[ResolutionAuditLogger, RecordingSink, Path]:
    ciphertext = write_ciphertext(tmp_path, "token.age")
    resolver = make_resolver(
        tmp_path,
        FakeDecryptor({ciphertext: PLAINTEXT}),
        identity_file=write_identity(tmp_path),
    )
    sink = RecordingSink()
    return ResolutionAuditLogger(resolver, sink), sink, ciphertext


class TestResolutionAuditLogger:
    def test_unlocked_decryption_is_unpinned(self, setup: tuple[ResolutionAuditLogger, RecordingSink, Path]) -> None:
        audited, sink, ciphertext = setup

        result = audited.resolve(SecretReference.create(ciphertext))

        [event] = sink.events
        assert event.action is AuditAction.SECRET_DECRYPTED
        assert event.status is AuditStatus.UNPINNED
        assert event.caller == "agelock.resolve"
        assert event.file == str(ciphertext)
        assert event.store_path == str(result.path)
        assert event.content_hash == result.hash.to_sri()
        assert event.hash_outcome == "not_provided"

    def test_cache_hit(self, setup: tuple[ResolutionAuditLogger, RecordingSink, Path]) -> None:
        audited, sink, ciphertext = setup
        digest = audited.resolve(SecretReference.create(ciphertext)).hash

        audited.resolve(SecretReference.create(ciphertext, digest))

        event = sink.events[-1]
        assert event.action is AuditAction.SECRET_CACHE_HIT
        assert event.status is AuditStatus.PINNED
        assert event.hash_outcome is None

    def test_failure_is_audited_and_reraised(self, setup: tuple[ResolutionAuditLogger, RecordingSink, Path]) -> None:
        audited, sink, ciphertext = setup
        wrong = sha256_digest(b"something else")

        with pytest.raises(HashMismatch):
            audited.resolve(SecretReference.create(ciphertext, wrong))

        [event] = sink.events
        assert event.action is AuditAction.SECRET_RESOLUTION_FAILED
        assert event.status is AuditStatus.FAILED
        assert (event.error, event.operation) == ("HashMismatch", "verify")
        assert event.store_path is None

    def test_plaintext_never_audited(self, setup: tuple[ResolutionAuditLogger, RecordingSink, Path]) -> None:
        audited, sink, ciphertext = setup
        audited.resolve(SecretReference.create(ciphertext))
        assert "audited secret" not in str(sink.events[0].to_dict())

    def test_sink_failure_does_not_fail_resolution(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path)
        resolver = make_resolver(tmp_path, FakeDecryptor({ciphertext: PLAINTEXT}), identity_file=write_identity(tmp_path))
        broken = MagicMock(spec=AuditSink)
        broken.emit.side_effect = OSError("disk full")

        result = ResolutionAuditLogger(resolver, broken).resolve(SecretReference.create(ciphertext))

        assert result.read_bytes() == PLAINTEXT

    def test_with_caller_keeps_sink(self, setup: tuple[ResolutionAuditLogger, RecordingSink, Path]) -> None:
        audited, sink, ciphertext = setup

        renamed = audited.with_caller("agelock.read_secret")
        renamed.resolve(SecretReference.create(ciphertext))

        assert renamed.who == "agelock.read_secret"
        assert sink.events[0].caller == "agelock.read_secret"

    def test_close_closes_sink(self, setup: tuple[ResolutionAuditLogger, RecordingSink, Path]) -> None:
        audited, sink, _ = setup
        audited.close()
        assert sink.closed

    def test_store_failure_is_audited(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path)
        (tmp_path / "store").write_text("not a directory")
        resolver = make_resolver(tmp_path, FakeDecryptor({ciphertext: PLAINTEXT}), identity_file=write_identity(tmp_path))
        sink = RecordingSink()

        with pytest.raises(StoreCommitFailed):
            ResolutionAuditLogger(resolver, sink).resolve(SecretReference.create(ciphertext))

        [event] = sink.events
        assert event.status is AuditStatus.FAILED
        assert (event.error, event.operation) == ("StoreCommitFailed", "commit")
