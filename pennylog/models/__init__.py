"""
Data Models Package

This package contains all Pydantic models used in Pennylog.
All data flowing through the system must conform to these schemas.
"""

from pennylog.models.finance import (
    CURRENCY_SYMBOLS,
    Categories,
    CategoryGroup,
    Entry,
    EntryDraft,
    EntryKind,
    ExpenseEntry,
    ExpenseType,
    FinanceData,
    FinanceStatistics,
    Frequency,
    IncomeEntry,
    Period,
    PeriodEntries,
    ResetCycle,
    SavingEntry,
    Settings,
    ValidationIssue,
    ValidationResult,
    default_finance_data,
    default_settings,
)
from pennylog.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "CURRENCY_SYMBOLS",
    "Categories",
    "CategoryGroup",
    "Entry",
    "EntryDraft",
    "EntryKind",
    "ExpenseEntry",
    "ExpenseType",
    "FinanceData",
    "FinanceStatistics",
    "Frequency",
    "IncomeEntry",
    "Period",
    "PeriodEntries",
    "ResetCycle",
    "SavingEntry",
    "Settings",
    "ValidationIssue",
    "ValidationResult",
    "default_finance_data",
    "default_settings",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
