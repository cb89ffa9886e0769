"""Destinations for audit events."""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any

from agelock.core.audit.types import AuditEvent, AuditStatus

logger = logging.getLogger(__name__)


class AuditSink(ABC):
    """Receives one event per resolution."""

    @abstractmethod
    def emit(self, event: AuditEvent) -> None: ...

    def close(self) -> None:  # noqa: B027
        """Release any resources held by the sink."""


class LoggingAuditSink(AuditSink):
    """Write events to a logger, pinned resolutions at INFO and the rest at WARNING.

    Args:
        logger_name: Defaults to ``"agelock.audit"``.
    """

    def __init__(self, logger_name: str = "agelock.audit") -> None:
        self._logger = logging.getLogger(logger_name)

    def emit(self, event: AuditEvent) -> None:
        level = logging.INFO if event.status is AuditStatus.PINNED else logging.WARNING
        self._logger.log(
            level,
            "[AUDIT] %s %s '%s' -> %s",
            event.caller,
            event.action.value,
            event.file,
            event.store_path or event.error,
            extra={"audit_event": event.to_dict()},
        )


class FileAuditSink(AuditSink):
    """Append events as JSON lines. The file is created on the first event.

    Emits from several threads are serialised so lines never interleave.

    Args:
        path: Audit file path; parent directories are created as needed.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._handle: IO[Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, event: AuditEvent) -> None:
        line = json.dumps(event.to_dict(), sort_keys=True)
        with self._lock:
            if self._handle is None:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._handle = self._path.open("a", encoding="utf-8")
            self._handle.write(line + "\n")
            self._handle.flush()

    def close(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.close()
                self._handle = None


class CompositeAuditSink(AuditSink):
    """Forward every event to several sinks; one failing sink does not stop the others."""

    def __init__(self, *sinks: AuditSink) -> None:
        self._sinks = sinks

    def emit(self, event: AuditEvent) -> None:
        for sink in self._sinks:
            self._guarded(sink.emit, sink, event)

    def close(self) -> None:
        for sink in self._sinks:
            self._guarded(sink.close, sink)

    @staticmethod
    def _guarded(fn: Any, sink: AuditSink, *args: Any) -> None:
        try:
            fn(*args)
        except Exception:
            logger.warning("Audit sink %s failed", type(sink).__name__, exc_info=True)
