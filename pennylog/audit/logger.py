"""
Audit Logger

DESIGN DECISION: Every state change in the tracker is logged.
This provides:
1. Traceability of entries added, deleted and cleared
2. Debugging capability when the store misbehaves
3. A visible record of silent recoveries from corrupt stored values

The audit logger:
- Is synchronous; the whole app runs in one thread
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging
import sys
from typing import Optional

import structlog

from pennylog.models.audit import AuditEvent, AuditEventBuilder


def _processors(log_format: str) -> list:
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """
    Configure structlog on top of the stdlib logger.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    structlog.configure(
        processors=_processors(log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure structlog for local logging
structlog.configure(
    processors=_processors("json"),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


_LEVEL_METHODS = {
    "debug": "debug",
    "info": "info",
    "warning": "warning",
    "error": "error",
}


class AuditLogger:
    """
    Central audit logging service.

    Writes each event to the structured log at the event's severity.
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("pennylog.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log write itself failed; never raises.
        """
        method = _LEVEL_METHODS.get(event.severity.value, "info")
        try:
            getattr(self._logger, method)("audit_event", **event.to_log_dict())
        except Exception as e:
            # Log failure but don't raise
            print(f"Warning: audit log write failed: {e}", file=sys.stderr)
            return False
        return True

    def log_entry_added(self, kind: str, entry_id: str, amount: float) -> None:
        self.log(AuditEventBuilder.entry_added(kind, entry_id, amount))

    def log_entry_rejected(self, kind: str, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.entry_rejected(kind, issues))

    def log_entry_deleted(self, kind: str, entry_id: str) -> None:
        self.log(AuditEventBuilder.entry_deleted(kind, entry_id))

    def log_entry_delete_missed(self, kind: str, entry_id: str) -> None:
        self.log(AuditEventBuilder.entry_delete_missed(kind, entry_id))

    def log_data_cleared(self, counts: dict[str, int]) -> None:
        self.log(AuditEventBuilder.data_cleared(counts))

    def log_settings_saved(self, changed_fields: list[str]) -> None:
        self.log(AuditEventBuilder.settings_saved(changed_fields))

    def log_data_loaded(self, key: str, found: bool) -> None:
        self.log(AuditEventBuilder.data_loaded(key, found))

    def log_storage_fallback(self, key: str, reason: str) -> None:
        self.log(AuditEventBuilder.storage_fallback(key, reason))

    def log_storage_repaired(self, key: str, dropped: list[str], reason: str) -> None:
        self.log(AuditEventBuilder.storage_repaired(key, dropped, reason))

    def log_save_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.save_failed(key, error_message))
