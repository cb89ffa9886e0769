"""Tests for building resolvers from configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from agelock.core.audit.resolution import ResolutionAuditLogger
from agelock.core.audit.sinks import FileAuditSink, LoggingAuditSink
from agelock.core.config import AgelockConfig, AuditConfig, StoreConfig
from agelock.core.metrics.registry import InMemoryRegistry
from agelock.core.resolution.resolver import SecretResolver
from agelock.core.store.substituters import DirectorySubstituter
from agelock.runner.factory import build_audit_sink, build_identity_resolver, build_resolver, build_store


class TestBuildStore:
    def test_expands_home(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        store = build_store(AgelockConfig(store=StoreConfig(root="~/store", substituters=["~/mirror"])))

        assert store.root == tmp_path / "store"
        [substituter] = store.substituters
        assert isinstance(substituter, DirectorySubstituter)
        assert substituter.uri == f"file://{tmp_path / 'mirror'}"


class TestBuildIdentityResolver:
    def test_config_file_wins(self) -> None:
        resolver = build_identity_resolver(
            AgelockConfig(identity_file="/keys/config.txt"),
            {"AGE_IDENTITY_FILE": "/keys/env.txt", "HOME": "/home/u"},
        )
        assert resolver.candidate_paths() == [Path("/keys/config.txt")]

    def test_environment_override(self) -> None:
        resolver = build_identity_resolver(AgelockConfig(), {"AGE_IDENTITY_FILE": "/keys/env.txt"})
        assert resolver.candidate_paths() == [Path("/keys/env.txt")]

    def test_defaults_from_home(self) -> None:
        resolver = build_identity_resolver(AgelockConfig(), {"HOME": "/home/u"})
        assert resolver.candidate_paths() == [Path("/home/u/.ssh/id_ed25519"), Path("/home/u/.ssh/id_rsa")]


class TestBuildAuditSink:
    def test_logging_by_default(self) -> None:
        assert isinstance(build_audit_sink(AuditConfig()), LoggingAuditSink)

    def test_file_when_path_set(self, tmp_path: Path) -> None:
        assert isinstance(build_audit_sink(AuditConfig(path=str(tmp_path / "a.jsonl"))), FileAuditSink)


class TestBuildResolver:
    def test_plain_resolver(self, tmp_path: Path) -> None:
        config = AgelockConfig(store=StoreConfig(root=str(tmp_path)), pure_eval=True)
        resolver = build_resolver(config, environ={}, metrics=InMemoryRegistry())

        assert isinstance(resolver, SecretResolver)
        assert resolver.pure_mode is True
        assert resolver.store.root == tmp_path  # type: ignore[attr-defined]

    def test_audited_resolver(self, tmp_path: Path) -> None:
        config = AgelockConfig(store=StoreConfig(root=str(tmp_path)), audit=AuditConfig())
        resolver = build_resolver(config, environ={})
        assert isinstance(resolver, ResolutionAuditLogger)

    def test_disabled_audit(self, tmp_path: Path) -> None:
        config = AgelockConfig(store=StoreConfig(root=str(tmp_path)), audit=AuditConfig(enabled=False))
        assert isinstance(build_resolver(config, environ={}), SecretResolver)
