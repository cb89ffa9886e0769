"""Content store abstractions."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from agelock.core.hashing.digest import Digest, HashAlgorithm

STORE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9+\-._?=]+$")
MAX_STORE_NAME_LENGTH = 211


class StoreError(Exception):
    """Base exception for content store errors."""

    pass


class InvalidStoreName(StoreError):
    """A name cannot be used as part of a store path."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"invalid store path name '{name}': {reason}")


def validate_store_name(name: str) -> str:
    """Return *name* unchanged if it is a legal store path name.

    Raises:
        InvalidStoreName: If the name is empty, too long, starts with a
            dot, or contains a character outside ``[A-Za-z0-9+-._?=]``.
    """
    if not name:
        raise InvalidStoreName(name, "name must not be empty")
    if len(name) > MAX_STORE_NAME_LENGTH:
        raise InvalidStoreName(name, f"name must be at most {MAX_STORE_NAME_LENGTH} characters")
    if name.startswith("."):
        raise InvalidStoreName(name, "name must not start with a period")
    if STORE_NAME_PATTERN.match(name) is None:
        raise InvalidStoreName(name, "name contains illegal characters")
    return name


@dataclass(frozen=True)
class StorePath:
    """A path inside a content store.

    Args:
        store_dir: Root directory of the store.
        base_name: ``<hash part>-<name>``.
    """

    store_dir: Path
    base_name: str

    @property
    def hash_part(self) -> str:
        return self.base_name.split("-", 1)[0]

    @property
    def name(self) -> str:
        return self.base_name.split("-", 1)[1]

    @property
    def path(self) -> Path:
        return self.store_dir / self.base_name

    def __str__(self) -> str:
        return str(self.path)


class ContentStore(ABC):
    """Content-addressed storage for decrypted secrets.

    Object locations are a pure function of the object's name, content
    and hash algorithm, so independent writers of the same bytes agree
    on the path.
    """

    @abstractmethod
    def make_fixed_output_path(self, name: str, digest: Digest) -> StorePath:
        """Compute where content with *digest* would be stored under *name*."""
        ...

    @abstractmethod
    def ensure(self, path: StorePath) -> bool:
        """Make *path* available locally without decrypting anything.

        Returns:
            ``True`` if the path is present or was fetched from a
            substituter, ``False`` otherwise.
        """
        ...

    @abstractmethod
    def commit(
        self,
        name: str,
        content: bytes,
        algorithm: HashAlgorithm = HashAlgorithm.SHA256,
    ) -> tuple[StorePath, Digest]:
        """Store *content* under its content address.

        Committing identical content twice returns the same path and does
        not rewrite it.

        Returns:
            The store path and the digest of *content*.
        """
        ...

    @abstractmethod
    def read(self, path: StorePath) -> bytes:
        """Return the bytes stored at *path*."""
        ...
