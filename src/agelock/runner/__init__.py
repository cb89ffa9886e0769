"""Runner: resolver wiring and the command-line interface."""

from agelock.runner.cli import main
from agelock.runner.factory import (
    build_audit_sink,
    build_identity_resolver,
    build_resolver,
    build_store,
)

__all__ = [
    "build_audit_sink",
    "build_identity_resolver",
    "build_resolver",
    "build_store",
    "main",
]
