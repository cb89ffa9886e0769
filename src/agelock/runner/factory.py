"""Build resolvers from :class:`~agelock.core.config.AgelockConfig`."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from agelock.core.audit.resolution import ResolutionAuditLogger
from agelock.core.audit.sinks import AuditSink, FileAuditSink, LoggingAuditSink
from agelock.core.config.observability import AuditConfig
from agelock.core.config.settings import AgelockConfig
from agelock.core.decrypt.age import AgeDecryptor
from agelock.core.identity.discovery import IdentityResolver
from agelock.core.metrics.registry import MeterRegistry
from agelock.core.resolution.resolver import SecretResolver
from agelock.core.store.local import LocalContentStore
from agelock.core.store.substituters import DirectorySubstituter
from agelock.evaluator.readers import Resolver


def build_store(config: AgelockConfig) -> LocalContentStore:
    root = Path(os.path.expanduser(config.store.root))
    substituters = [DirectorySubstituter(os.path.expanduser(s)) for s in config.store.substituters]
    return LocalContentStore(root, substituters)


def build_identity_resolver(config: AgelockConfig, environ: Mapping[str, str] | None = None) -> IdentityResolver:
    """Use the configured identity file, falling back to the environment."""
    env = os.environ if environ is None else environ
    if config.identity_file:
        return IdentityResolver(identity_file=config.identity_file, home=env.get("HOME"))
    return IdentityResolver.from_environment(env)


def build_audit_sink(config: AuditConfig) -> AuditSink:
    if config.path:
        return FileAuditSink(os.path.expanduser(config.path))
    return LoggingAuditSink()


def build_resolver(
    config: AgelockConfig,
    *,
    environ: Mapping[str, str] | None = None,
    metrics: MeterRegistry | None = None,
) -> Resolver:
    """Wire a resolver from *config*.

    Args:
        config: Loaded configuration.
        environ: Mapping consulted for ``AGE_IDENTITY_FILE`` and ``HOME``.
            Defaults to ``os.environ``.
        metrics: Optional metrics registry.

    Returns:
        A :class:`SecretResolver`, wrapped in a
        :class:`ResolutionAuditLogger` when auditing is enabled.
    """
    resolver = SecretResolver(
        build_store(config),
        AgeDecryptor(config.age_path, timeout=config.decrypt_timeout_seconds),
        build_identity_resolver(config, environ),
        pure_mode=config.pure_eval,
        metrics=metrics,
    )
    if config.audit is not None and config.audit.enabled:
        return ResolutionAuditLogger(resolver, build_audit_sink(config.audit))
    return resolver
