"""Shared fixtures for integration tests that require the real age tools."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest


@dataclass
class AgeKey:
    identity: Path
    recipient: str


@pytest.fixture(scope="module")
def age_key(tmp_path_factory: pytest.TempPathFactory) -> AgeKey:
    """Generate a throwaway X25519 identity with ``age-keygen``.

    Tests using this fixture are skipped when ``age`` or ``age-keygen``
    is not on ``PATH``.
    """
    if shutil.which("age") is None or shutil.which("age-keygen") is None:
        pytest.skip("age and age-keygen are required")
    identity = tmp_path_factory.mktemp("keys") / "key.txt"
    subprocess.run(["age-keygen", "-o", str(identity)], check=True, capture_output=True)
    recipient = subprocess.run(
        ["age-keygen", "-y", str(identity)],
        check=True,
        capture_output=True,
        text=True,
    ).stdout.strip()
    return AgeKey(identity, recipient)


@pytest.fixture
def encrypt(age_key: AgeKey, tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that encrypts bytes to ``<tmp_path>/<name>``."""

    def _encrypt(plaintext: bytes, name: str = "plain.txt.age") -> Path:
        out = tmp_path / name
        subprocess.run(
            ["age", "--encrypt", "-r", age_key.recipient, "-o", str(out)],
            input=plaintext,
            check=True,
            capture_output=True,
        )
        return out

    return _encrypt
