"""Directory-backed content store."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Sequence
from pathlib import Path

from agelock.core.hashing.digest import Digest, HashAlgorithm
from agelock.core.store.base import ContentStore, StoreError, StorePath
from agelock.core.store.paths import make_fixed_output_path
from agelock.core.store.substituters import Substituter

logger = logging.getLogger(__name__)

_READ_ONLY = stat.S_IRUSR | stat.S_IRGRP | stat.S_IROTH


class LocalContentStore(ContentStore):
    """Content store kept in a single local directory.

    Objects are flat files named by their fixed-output path and made
    read-only once written.  Writes go through a temporary file in the
    store directory and are renamed into place, so concurrent commits of
    the same content converge on one object.

    Args:
        root: Store directory. Created on first commit.
        substituters: Caches consulted by :meth:`ensure`, in order.
    """

    def __init__(self, root: str | Path, substituters: Sequence[Substituter] = ()) -> None:
        self._root = Path(root).absolute()
        self._substituters = list(substituters)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def substituters(self) -> list[Substituter]:
        return list(self._substituters)

    def make_fixed_output_path(self, name: str, digest: Digest) -> StorePath:
        return make_fixed_output_path(self._root, name, digest)

    def is_valid_path(self, path: StorePath) -> bool:
        return path.path.is_file()

    def ensure(self, path: StorePath) -> bool:
        if self.is_valid_path(path):
            return True
        for substituter in self._substituters:
            try:
                content = substituter.fetch(path)
            except Exception:
                logger.warning(
                    "Substituter %s failed to fetch %s",
                    substituter.uri,
                    path,
                    exc_info=True,
                )
                continue
            if content is None:
                continue
            if self._add(path, content):
                logger.info("Substituted %s from %s", path, substituter.uri)
                return True
            logger.warning(
                "Substituter %s returned content for %s that does not match its hash",
                substituter.uri,
                path,
            )
        return False

    def commit(
        self,
        name: str,
        content: bytes,
        algorithm: HashAlgorithm = HashAlgorithm.SHA256,
    ) -> tuple[StorePath, Digest]:
        digest = Digest.of(content, algorithm)
        path = self.make_fixed_output_path(name, digest)
        if not self.is_valid_path(path):
            self._write(path, content)
            logger.debug("Committed %s", path)
        return path, digest

    def read(self, path: StorePath) -> bytes:
        if path.store_dir != self._root:
            raise StoreError(f"path '{path}' is not in store '{self._root}'")
        return path.path.read_bytes()

    def _add(self, path: StorePath, content: bytes) -> bool:
        """Store substituted *content* at *path* if it hashes to that path."""
        expected_name = path.name
        computed = self.make_fixed_output_path(expected_name, Digest.of(content))
        if computed != path:
            return False
        if not self.is_valid_path(path):
            self._write(path, content)
        return True

    def _write(self, path: StorePath, content: bytes) -> None:
        self._root.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.base_name}.", suffix=".tmp", dir=self._root)
        tmp_path = Path(tmp)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _READ_ONLY)
            os.replace(tmp_path, path.path)
        finally:
            tmp_path.unlink(missing_ok=True)
