"""Tests for the CLI entrypoint."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from agelock.core.config.observability import LogFormat, LoggingConfig
from agelock.core.hashing.verifier import sha256_digest
from agelock.runner.cli import JsonLogFormatter, _build_parser, configure_logging, main
from tests.factories import FakeDecryptor, make_resolver, write_ciphertext, write_identity


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def ciphertext(tmp_path: Path) -> Path:
    return write_ciphertext(tmp_path)


@pytest.fixture
def fake_build(tmp_path: Path, ciphertext: Path) -> Iterator[MagicMock]:
    decryptor = FakeDecryptor(
        {
            ciphertext: b"hello from age",
            tmp_path / "app.conf.age": b"{ db { port = 5432 } }",
        }
    )
    identity = write_identity(tmp_path)

    def build(config: object) -> object:
        return make_resolver(tmp_path, decryptor, identity_file=identity, pure_mode=config.pure_eval)  # type: ignore[attr-defined]

    with patch("agelock.runner.cli.build_resolver", side_effect=build) as mock_build:
        yield mock_build


class TestBuildParser:
    def test_requires_command(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])

    def test_read_requires_file(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args(["read"])

    def test_defaults(self) -> None:
        args = _build_parser().parse_args(["read", "s.age"])
        assert args.command == "read"
        assert args.file == "s.age"
        assert args.hash is None
        assert args.pure is False
        assert args.substituter == []
        assert args.log_level is None

    def test_all_flags(self) -> None:
        args = _build_parser().parse_args([
            "--config", "agelock.conf",
            "--log-level", "DEBUG",
            "path", "s.age",
            "--hash", "sha256-abc=",
            "--pure",
            "--store", "/tmp/store",
            "--substituter", "/mnt/a",
            "--substituter", "/mnt/b",
            "--identity", "/keys/age.txt",
            "--age", "rage",
        ])
        assert args.config == "agelock.conf"
        assert args.log_level == "DEBUG"
        assert args.hash == "sha256-abc="
        assert args.pure is True
        assert args.store == "/tmp/store"
        assert args.substituter == ["/mnt/a", "/mnt/b"]
        assert args.identity == "/keys/age.txt"
        assert args.age_path == "rage"


class TestMainCommands:
    def test_read(self, fake_build: MagicMock, ciphertext: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["read", str(ciphertext)]) == 0
        assert capsys.readouterr().out == "hello from age"

    def test_path(self, fake_build: MagicMock, tmp_path: Path, ciphertext: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["path", str(ciphertext)]) == 0
        out = capsys.readouterr().out.strip()
        assert out.startswith(str(tmp_path / "store"))
        assert out.endswith("-plain.txt")
        assert Path(out).read_bytes() == b"hello from age"

    def test_import(self, fake_build: MagicMock, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        encrypted = write_ciphertext(tmp_path, "app.conf.age")
        assert main(["import", str(encrypted)]) == 0
        assert json.loads(capsys.readouterr().out) == {"db": {"port": 5432}}

    def test_hash(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        plain = tmp_path / "plain.txt"
        plain.write_bytes(b"hello from age")
        assert main(["hash", str(plain)]) == 0
        assert capsys.readouterr().out.strip() == sha256_digest(b"hello from age").to_sri()

    def test_hash_missing_file(self, tmp_path: Path) -> None:
        assert main(["hash", str(tmp_path / "missing")]) == 1


class TestMainFailures:
    def test_pure_without_hash(self, fake_build: MagicMock, ciphertext: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["read", "--pure", str(ciphertext)]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "requires 'hash' in pure evaluation mode" in captured.err

    def test_hash_mismatch(self, fake_build: MagicMock, ciphertext: Path, capsys: pytest.CaptureFixture[str]) -> None:
        wrong = sha256_digest(b"other").to_sri()
        assert main(["read", "--hash", wrong, str(ciphertext)]) == 1
        assert "hash mismatch" in capsys.readouterr().err

    def test_invalid_hash(self, fake_build: MagicMock, ciphertext: Path) -> None:
        assert main(["read", "--hash", "sha256:zz", str(ciphertext)]) == 1

    def test_unwritable_store(self, fake_build: MagicMock, tmp_path: Path, ciphertext: Path, capsys: pytest.CaptureFixture[str]) -> None:
        not_a_dir = tmp_path / "store"
        not_a_dir.write_text("")

        assert main(["path", str(ciphertext)]) == 1
        assert "cannot add the decrypted contents" in capsys.readouterr().err

    def test_bad_config(self, tmp_path: Path, ciphertext: Path) -> None:
        config = tmp_path / "bad.conf"
        config.write_text("{ decrypt_timeout_seconds: -1.5 }")
        assert main(["--config", str(config), "read", str(ciphertext)]) == 1


class TestConfigOverrides:
    def test_flags_override_file(self, fake_build: MagicMock, tmp_path: Path, ciphertext: Path) -> None:
        config_file = tmp_path / "agelock.conf"
        config_file.write_text('{ age_path: "rage", store { root: "/from/file", substituters: ["/mnt/a"] } }')
        digest = sha256_digest(b"hello from age").to_sri()

        main([
            "--config", str(config_file),
            "path", str(ciphertext),
            "--hash", digest,
            "--pure",
            "--store", str(tmp_path / "cli-store"),
            "--substituter", "/mnt/b",
            "--identity", "/keys/age.txt",
        ])

        config = fake_build.call_args.args[0]
        assert config.pure_eval is True
        assert config.store.root == str(tmp_path / "cli-store")
        assert config.store.substituters == ["/mnt/a", "/mnt/b"]
        assert config.identity_file == "/keys/age.txt"
        assert config.age_path == "rage"


class TestConfigureLogging:
    def test_text_format(self) -> None:
        configure_logging(LoggingConfig())
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JsonLogFormatter)

    def test_json_format_and_override(self) -> None:
        configure_logging(LoggingConfig(format=LogFormat.JSON), "DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonLogFormatter)

    def test_json_formatter_output(self) -> None:
        record = logging.LogRecord("agelock.resolver", logging.WARNING, __file__, 1, "hash %s", ("sha256-x",), None)
        payload = json.loads(JsonLogFormatter().format(record))
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "agelock.resolver"
        assert payload["message"] == "hash sha256-x"
