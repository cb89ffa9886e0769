"""Decryptor abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path


class DecryptorError(Exception):
    """The decryption tool failed.

    Args:
        message: The tool's own diagnostic text.
        returncode: Exit status, if the tool ran at all.
    """

    def __init__(self, message: str, returncode: int | None = None) -> None:
        self.message = message
        self.returncode = returncode
        super().__init__(message)


class Decryptor(ABC):
    """Turns a ciphertext file into plaintext using identity files."""

    @abstractmethod
    def decrypt(self, ciphertext: Path, identities: Sequence[Path]) -> bytes:
        """Decrypt *ciphertext* trying *identities* in order.

        Raises:
            DecryptorError: On any failure, carrying the tool's diagnostic.
        """
        ...
