"""Audit logging package."""

from pennylog.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
