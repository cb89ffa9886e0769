"""Errors raised by the evaluator-facing secret readers."""

from __future__ import annotations

from pathlib import Path


class SecretEvaluationError(Exception):
    """Base exception for errors outside the resolution itself."""

    pass


class InvalidSecretAttrs(SecretEvaluationError):
    """The attribute set describing a secret is malformed."""

    def __init__(self, who: str, reason: str) -> None:
        self.who = who
        self.reason = reason
        super().__init__(reason)


class UnrepresentableContent(SecretEvaluationError):
    """Decrypted bytes cannot be returned as a string."""

    def __init__(self, who: str, file: Path, reason: str) -> None:
        self.file = file
        super().__init__(f"{who}: the decrypted contents of '{file}' cannot be represented as a string: {reason}")


class SecretImportError(SecretEvaluationError):
    """Decrypted content could not be evaluated as a document."""

    def __init__(self, who: str, file: Path, cause: Exception) -> None:
        self.file = file
        self.cause = cause
        super().__init__(f"{cause}\n  while evaluating the decrypted content of '{file}' from '{who}'")
        self.__cause__ = cause
