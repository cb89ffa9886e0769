"""Tests for read_secret, import_secret and resolve_secret."""

from __future__ import annotations

from pathlib import Path

import pytest

from agelock.core.hashing.verifier import sha256_digest
from agelock.core.resolution.exceptions import PurityViolation
from agelock.core.resolution.resolver import SecretResolver
from agelock.evaluator.exceptions import InvalidSecretAttrs, SecretImportError, UnrepresentableContent
from agelock.evaluator.readers import IMPORT_SECRET, READ_SECRET, import_secret, read_secret, resolve_secret
from tests.factories import FakeDecryptor, make_resolver, write_ciphertext, write_identity


def _resolver(tmp_path: Path, plaintexts: dict[Path, bytes], **kwargs: object) -> SecretResolver:
    return make_resolver(tmp_path, FakeDecryptor(plaintexts), identity_file=write_identity(tmp_path), **kwargs)  # type: ignore[arg-type]


class TestReadSecret:
    def test_returns_text(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path)
        resolver = _resolver(tmp_path, {ciphertext: b"hello from age"})

        assert read_secret(resolver, {"file": str(ciphertext)}) == "hello from age"

    def test_hash_locked(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path)
        resolver = _resolver(tmp_path, {ciphertext: "pässwörd\n".encode()})
        digest = sha256_digest("pässwörd\n".encode())

        assert read_secret(resolver, {"file": ciphertext, "hash": digest.to_sri()}) == "pässwörd\n"

    def test_rejects_nul_but_keeps_store_object(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path, "binary.age")
        content = b"has\x00null"
        resolver = _resolver(tmp_path, {ciphertext: content})

        with pytest.raises(UnrepresentableContent, match="NUL byte"):
            read_secret(resolver, {"file": ciphertext})

        digest = sha256_digest(content)
        path = resolver.store.make_fixed_output_path("binary", digest)
        assert resolver.store.read(path) == content

    def test_rejects_invalid_utf8(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path)
        resolver = _resolver(tmp_path, {ciphertext: b"\xff\xfe"})

        with pytest.raises(UnrepresentableContent, match="not valid UTF-8"):
            read_secret(resolver, {"file": ciphertext})

    def test_errors_name_read_secret(self, tmp_path: Path) -> None:
        resolver = _resolver(tmp_path, {}, pure_mode=True)

        with pytest.raises(PurityViolation, match=f"^{READ_SECRET} requires"):
            read_secret(resolver, {"file": tmp_path / "x.age"})

    def test_invalid_attrs(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidSecretAttrs):
            read_secret(_resolver(tmp_path, {}), {"path": "x.age"})


class TestImportSecret:
    def test_parses_document(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path, "db.conf.age")
        resolver = _resolver(tmp_path, {ciphertext: b'{ x = 42, db { user = "app" } }'})

        assert import_secret(resolver, {"file": ciphertext}) == {"x": 42, "db": {"user": "app"}}

    def test_accepts_nul_free_multiline(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path, "env.age")
        resolver = _resolver(tmp_path, {ciphertext: b"token = abc\nport = 5432\n"})

        assert import_secret(resolver, {"file": ciphertext}) == {"token": "abc", "port": 5432}

    def test_parse_failure_names_file(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path, "broken.age")
        resolver = _resolver(tmp_path, {ciphertext: b"x = [1, 2"})

        with pytest.raises(SecretImportError) as exc_info:
            import_secret(resolver, {"file": ciphertext})

        message = str(exc_info.value)
        assert f"while evaluating the decrypted content of '{ciphertext}'" in message
        assert IMPORT_SECRET in message
        assert exc_info.value.__cause__ is exc_info.value.cause


class TestResolveSecret:
    def test_returns_store_path(self, tmp_path: Path) -> None:
        ciphertext = write_ciphertext(tmp_path)
        resolver = _resolver(tmp_path, {ciphertext: b"hello"})

        result = resolve_secret(resolver, {"file": ciphertext})

        assert result.path.name == "plain.txt"
        assert result.read_bytes() == b"hello"
