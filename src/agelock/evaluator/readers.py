"""Evaluator-facing entry points: read a secret as text or import it as HOCON.

Both resolve through a :class:`~agelock.core.resolution.SecretResolver`
and then apply their own constraints to the stored bytes.  The resolver
only guarantees verified bytes in the store; whether those bytes fit a
string or parse as a document is decided here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from pyhocon import ConfigFactory

from agelock.core.resolution.types import ResolvedSecret, SecretReference
from agelock.core.store.base import ContentStore
from agelock.evaluator.attrs import parse_secret_attrs
from agelock.evaluator.exceptions import SecretImportError, UnrepresentableContent

logger = logging.getLogger(__name__)

READ_SECRET = "agelock.read_secret"
IMPORT_SECRET = "agelock.import_secret"
RESOLVE_SECRET = "agelock.resolve_secret"


class Resolver(Protocol):
    """What the readers need from a resolver (or an audited wrapper of one)."""

    @property
    def store(self) -> ContentStore: ...

    def with_caller(self, who: str) -> Resolver: ...

    def resolve(self, reference: SecretReference) -> ResolvedSecret: ...


def resolve_secret(resolver: Resolver, attrs: Mapping[str, Any], who: str = RESOLVE_SECRET) -> ResolvedSecret:
    """Validate *attrs* and resolve the secret they describe, reporting as *who*."""
    parsed = parse_secret_attrs(attrs, who)
    return resolver.with_caller(who).resolve(SecretReference.create(parsed.file, parsed.hash))


def _resolve(resolver: Resolver, attrs: Mapping[str, Any], who: str) -> tuple[Path, bytes]:
    result = resolve_secret(resolver, attrs, who)
    return Path(attrs["file"]), resolver.store.read(result.path)


def read_secret(resolver: Resolver, attrs: Mapping[str, Any]) -> str:
    """Decrypt a secret and return its contents as a string.

    Args:
        resolver: Resolver to decrypt through.
        attrs: ``{"file": ..., "hash": ...}``; ``hash`` is optional.

    Raises:
        InvalidSecretAttrs: If *attrs* is malformed.
        ResolutionError: If the secret cannot be resolved.
        UnrepresentableContent: If the plaintext contains a NUL byte or
            is not valid UTF-8.
    """
    file, content = _resolve(resolver, attrs, READ_SECRET)
    if b"\0" in content:
        raise UnrepresentableContent(READ_SECRET, file, "it contains a NUL byte")
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UnrepresentableContent(READ_SECRET, file, "it is not valid UTF-8") from exc


def import_secret(resolver: Resolver, attrs: Mapping[str, Any]) -> dict[str, Any]:
    """Decrypt a HOCON document and return it as a plain dictionary.

    Raises:
        InvalidSecretAttrs: If *attrs* is malformed.
        ResolutionError: If the secret cannot be resolved.
        SecretImportError: If the plaintext does not parse.
    """
    file, content = _resolve(resolver, attrs, IMPORT_SECRET)
    try:
        tree = ConfigFactory.parse_string(content.decode("utf-8"))
    except Exception as exc:
        raise SecretImportError(IMPORT_SECRET, file, exc) from exc
    logger.debug("Imported %d top-level keys from '%s'", len(tree), file)
    return dict(tree.as_plain_ordered_dict())
