"""
Audit Models for Pennylog

Every state change in the tracker is logged for audit purposes.
This provides:
1. Traceability of what was added, removed or reconfigured
2. Debugging information when persistence goes wrong
3. A record of silent recoveries (corrupt stored values)

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Entries
    ENTRY_ADDED = "entry_added"
    ENTRY_REJECTED = "entry_rejected"
    ENTRY_DELETED = "entry_deleted"
    ENTRY_DELETE_MISSED = "entry_delete_missed"
    DATA_CLEARED = "data_cleared"

    # Settings
    SETTINGS_SAVED = "settings_saved"

    # Persistence
    DATA_LOADED = "data_loaded"
    STORAGE_FALLBACK = "storage_fallback"
    STORAGE_REPAIRED = "storage_repaired"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What is this about? (e.g. 'income', 'expense', 'settings', 'store')
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_added("expense", entry_id, 50.0)
        event = AuditEventBuilder.save_failed("financeData", "disk full")
    """

    @staticmethod
    def entry_added(kind: str, entry_id: str, amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_ADDED,
            entity_type=kind,
            entity_id=entry_id,
            description=f"{kind.capitalize()} entry added",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def entry_rejected(kind: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=kind,
            description=f"{kind.capitalize()} entry rejected: {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(kind: str, entry_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_type=kind,
            entity_id=entry_id,
            description=f"{kind.capitalize()} entry deleted",
            is_user_action=True,
        )

    @staticmethod
    def entry_delete_missed(kind: str, entry_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETE_MISSED,
            severity=AuditSeverity.DEBUG,
            entity_type=kind,
            entity_id=entry_id,
            description=f"No {kind} entry with this id; nothing deleted",
            is_user_action=True,
        )

    @staticmethod
    def data_cleared(counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            entity_type="finance_data",
            description="All entries cleared",
            details={"removed": counts},
            is_user_action=True,
        )

    @staticmethod
    def settings_saved(changed_fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTINGS_SAVED,
            entity_type="settings",
            description="Settings saved",
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def data_loaded(key: str, found: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="store",
            entity_id=key,
            description=f"Loaded '{key}'" if found else f"No stored '{key}', using defaults",
            details={"found": found},
        )

    @staticmethod
    def storage_fallback(key: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FALLBACK,
            severity=AuditSeverity.WARNING,
            entity_type="store",
            entity_id=key,
            description=f"Stored '{key}' unusable, defaults substituted",
            error_message=reason,
        )

    @staticmethod
    def storage_repaired(key: str, dropped: list[str], reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_REPAIRED,
            severity=AuditSeverity.WARNING,
            entity_type="store",
            entity_id=key,
            description=f"Stored '{key}' loaded without its invalid parts",
            details={"dropped": dropped},
            error_message=reason,
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="store",
            entity_id=key,
            description=f"Failed to persist '{key}'",
            error_message=error_message,
        )
