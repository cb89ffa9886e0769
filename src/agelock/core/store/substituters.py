"""Substituters: sources of store objects that need no decryption."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from agelock.core.store.base import StorePath


class Substituter(ABC):
    """A remote or shared cache of store objects."""

    @property
    @abstractmethod
    def uri(self) -> str:
        """Human-readable location, used in log messages."""
        ...

    @abstractmethod
    def fetch(self, path: StorePath) -> bytes | None:
        """Return the content for *path*, or ``None`` if it is absent.

        Implementations may raise on transport errors; callers treat any
        exception as a miss.
        """
        ...


class DirectorySubstituter(Substituter):
    """Serve store objects from another store directory.

    Objects are looked up by base name, so the directory is typically a
    mirror of (or shared mount from) a store with the same layout.

    Args:
        root: Directory holding ``<hash>-<name>`` objects.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def uri(self) -> str:
        return f"file://{self._root}"

    def fetch(self, path: StorePath) -> bytes | None:
        candidate = self._root / path.base_name
        if not candidate.is_file():
            return None
        return candidate.read_bytes()
