"""Decryption through the ``age`` command-line tool."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from agelock.core.decrypt.base import Decryptor, DecryptorError

logger = logging.getLogger(__name__)


class AgeDecryptor(Decryptor):
    """Run ``age --decrypt`` with one ``-i`` flag per identity.

    age tries the identities in the order given.

    Args:
        age_path: Executable name or path. Defaults to ``"age"``.
        timeout: Seconds to wait for the process, or ``None`` to wait
            indefinitely.
    """

    def __init__(self, age_path: str = "age", timeout: float | None = None) -> None:
        self._age_path = age_path
        self._timeout = timeout

    @property
    def age_path(self) -> str:
        return self._age_path

    def build_command(self, ciphertext: Path, identities: Sequence[Path]) -> list[str]:
        cmd = [self._age_path, "--decrypt"]
        for identity in identities:
            cmd.extend(["-i", str(identity)])
        cmd.append(str(ciphertext))
        return cmd

    def decrypt(self, ciphertext: Path, identities: Sequence[Path]) -> bytes:
        cmd = self.build_command(ciphertext, identities)
        logger.debug("Running %s with %d identities", self._age_path, len(identities))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                check=False,
                stdin=subprocess.DEVNULL,
                timeout=self._timeout,
            )
        except FileNotFoundError:
            raise DecryptorError(f"program '{self._age_path}' not found") from None
        except subprocess.TimeoutExpired:
            raise DecryptorError(f"program '{self._age_path}' timed out after {self._timeout}s") from None

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise DecryptorError(
                stderr or f"program '{self._age_path}' failed with exit code {result.returncode}",
                returncode=result.returncode,
            )
        return result.stdout
