"""Parsing of ``{ file = ...; hash = ...; }`` style secret arguments."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agelock.core.hashing.digest import Digest, DigestParseError
from agelock.evaluator.exceptions import InvalidSecretAttrs

ALLOWED_ATTRS = frozenset({"file", "hash"})


@dataclass(frozen=True)
class SecretAttrs:
    """Validated secret arguments.

    Args:
        file: Path to the encrypted file.
        hash: Expected plaintext digest, or ``None``.
    """

    file: Path
    hash: Digest | None = None


def parse_secret_attrs(attrs: Mapping[str, Any], who: str) -> SecretAttrs:
    """Validate a secret's attribute mapping.

    ``file`` is required.  ``hash`` is optional and an empty string
    counts as absent.  Any other key is rejected.

    Raises:
        InvalidSecretAttrs: On unknown keys, a missing ``file``, or an
            unparseable ``hash``.
    """
    for key in attrs:
        if key not in ALLOWED_ATTRS:
            raise InvalidSecretAttrs(who, f"unsupported attribute '{key}' in '{who}'")

    file = attrs.get("file")
    if file is None or file == "":
        raise InvalidSecretAttrs(who, f"'file' attribute is required in '{who}'")
    if not isinstance(file, (str, Path)):
        raise InvalidSecretAttrs(
            who,
            f"expected a path for the 'file' attribute passed to '{who}', got {type(file).__name__}",
        )

    raw_hash = attrs.get("hash")
    if raw_hash is not None and not isinstance(raw_hash, str):
        raise InvalidSecretAttrs(
            who,
            f"expected a string for the 'hash' attribute passed to '{who}', got {type(raw_hash).__name__}",
        )
    try:
        digest = Digest.parse_optional(raw_hash)
    except DigestParseError as exc:
        raise InvalidSecretAttrs(who, f"{exc}, while evaluating the 'hash' attribute passed to '{who}'") from exc

    return SecretAttrs(file=Path(file), hash=digest)
