"""Passive subscribers to archive completion events."""

from server.services.observers.audit import AuditObserver
from server.services.observers.usage_log import UsageLogObserver

__all__ = [
    "AuditObserver",
    "UsageLogObserver",
]
