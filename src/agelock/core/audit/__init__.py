"""Audit trail for secret resolution."""

from agelock.core.audit.resolution import ResolutionAuditLogger
from agelock.core.audit.sinks import AuditSink, CompositeAuditSink, FileAuditSink, LoggingAuditSink
from agelock.core.audit.types import AuditAction, AuditEvent, AuditStatus

__all__ = [
    "AuditAction",
    "AuditEvent",
    "AuditSink",
    "AuditStatus",
    "CompositeAuditSink",
    "FileAuditSink",
    "LoggingAuditSink",
    "ResolutionAuditLogger",
]
