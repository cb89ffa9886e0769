"""Logging and audit configuration models."""

from dataclasses import dataclass
from enum import Enum


class LogLevel(str, Enum):
    """Root log level; values are the stdlib level names."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Text lines for terminals, JSON objects for log shippers."""

    TEXT = "text"
    JSON = "json"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""

    level: LogLevel = LogLevel.WARNING
    """Logging level (default: WARNING, which still shows pinned-hash notices)"""

    format: LogFormat = LogFormat.TEXT
    """Log output format (default: text)"""


@dataclass
class AuditConfig:
    """Configuration for the resolution audit trail."""

    enabled: bool = True
    """Enable the audit trail (default: True)"""

    path: str | None = None
    """JSON-lines audit file; events go to the ``agelock.audit`` logger when unset"""
