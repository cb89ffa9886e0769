"""Evaluator glue: secret arguments, string reads and document imports."""

from agelock.evaluator.attrs import SecretAttrs, parse_secret_attrs
from agelock.evaluator.exceptions import (
    InvalidSecretAttrs,
    SecretEvaluationError,
    SecretImportError,
    UnrepresentableContent,
)
from agelock.evaluator.readers import (
    IMPORT_SECRET,
    READ_SECRET,
    RESOLVE_SECRET,
    import_secret,
    read_secret,
    resolve_secret,
)

__all__ = [
    "IMPORT_SECRET",
    "READ_SECRET",
    "RESOLVE_SECRET",
    "InvalidSecretAttrs",
    "SecretAttrs",
    "SecretEvaluationError",
    "SecretImportError",
    "UnrepresentableContent",
    "import_secret",
    "parse_secret_attrs",
    "read_secret",
    "resolve_secret",
]
