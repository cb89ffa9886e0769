"""Command-line interface for resolving encrypted secrets."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from agelock.core.audit.resolution import ResolutionAuditLogger
from agelock.core.config.loader import load_config
from agelock.core.config.observability import LogFormat, LoggingConfig
from agelock.core.config.settings import AgelockConfig
from agelock.core.hashing.digest import DigestParseError
from agelock.core.hashing.verifier import sha256_digest
from agelock.core.resolution.exceptions import ResolutionError
from agelock.core.store.base import StoreError
from agelock.evaluator.exceptions import SecretEvaluationError
from agelock.evaluator.readers import import_secret, read_secret, resolve_secret
from agelock.runner.factory import build_resolver

logger = logging.getLogger(__name__)


class JsonLogFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(config: LoggingConfig, level: str | None = None) -> None:
    """Configure root logging on stderr from *config*; *level* overrides it."""
    handler = logging.StreamHandler(sys.stderr)
    if config.format is LogFormat.JSON:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level or config.level.value, handlers=[handler], force=True)


def _add_resolve_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to the age-encrypted file.")
    parser.add_argument(
        "--hash",
        default=None,
        help="Expected SHA-256 of the plaintext (e.g. sha256-...). Enables cache hits.",
    )
    parser.add_argument(
        "--pure",
        action="store_true",
        default=False,
        help="Refuse to decrypt when no --hash is given.",
    )
    parser.add_argument("--store", default=None, help="Content store directory.")
    parser.add_argument(
        "--substituter",
        action="append",
        default=[],
        help="Directory to fetch hash-locked paths from. May be repeated.",
    )
    parser.add_argument("--identity", default=None, help="Identity file to decrypt with.")
    parser.add_argument("--age", dest="age_path", default=None, help="age executable to run.")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agelock",
        description="Resolve age-encrypted secrets into a content-addressed store.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a HOCON configuration file (default: AGELOCK_* variables, then built-in defaults).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Override the configured logging level.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    read = commands.add_parser("read", help="Print the decrypted contents as text.")
    _add_resolve_arguments(read)

    path = commands.add_parser("path", help="Print the store path of the decrypted contents.")
    _add_resolve_arguments(path)

    imp = commands.add_parser("import", help="Print a decrypted HOCON document as JSON.")
    _add_resolve_arguments(imp)

    hash_cmd = commands.add_parser("hash", help="Print the SRI hash of a plaintext file.")
    hash_cmd.add_argument("file", help="Plaintext file to hash.")
    return parser


def _load_config(args: argparse.Namespace) -> AgelockConfig:
    config = load_config(args.config)
    if args.pure:
        config.pure_eval = True
    if args.store:
        config.store.root = args.store
    if args.substituter:
        config.store.substituters = [*config.store.substituters, *args.substituter]
    if args.identity:
        config.identity_file = args.identity
    if args.age_path:
        config.age_path = args.age_path
    return config


def _attrs(args: argparse.Namespace) -> dict[str, Any]:
    attrs: dict[str, Any] = {"file": args.file}
    if args.hash is not None:
        attrs["hash"] = args.hash
    return attrs


def _run(args: argparse.Namespace, config: AgelockConfig) -> int:
    resolver = build_resolver(config)
    try:
        if args.command == "read":
            sys.stdout.write(read_secret(resolver, _attrs(args)))
        elif args.command == "import":
            print(json.dumps(import_secret(resolver, _attrs(args)), indent=2, sort_keys=True))
        else:
            print(resolve_secret(resolver, _attrs(args)).path)
    finally:
        if isinstance(resolver, ResolutionAuditLogger):
            resolver.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint.

    Args:
        argv: Command-line arguments. Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 for success, 1 for any resolution error. Usage
        errors exit with 2 from argparse.
    """
    args = _build_parser().parse_args(argv)

    if args.command == "hash":
        configure_logging(LoggingConfig(), args.log_level)
        try:
            content = Path(args.file).read_bytes()
        except OSError as exc:
            logger.error("Cannot read '%s': %s", args.file, exc)
            return 1
        print(sha256_digest(content).to_sri())
        return 0

    try:
        config = _load_config(args)
    except Exception as exc:
        configure_logging(LoggingConfig(), args.log_level)
        logger.error("Failed to load configuration: %s", exc)
        return 1
    configure_logging(config.logging, args.log_level)

    try:
        return _run(args, config)
    except (ResolutionError, SecretEvaluationError, StoreError, DigestParseError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
